from __future__ import annotations

from moodmap.recommendations.moods import find_preset
from moodmap.recommendations.prompt import build_prompt


def test_custom_prompt_is_used_verbatim():
    custom = "Quiet library with a view"
    assert build_prompt("Work Mode", custom) == custom


def test_blank_custom_prompt_falls_back_to_template():
    prompt = build_prompt("Cozy", "   ")
    assert 'I am in a "Cozy" mood.' in prompt


def test_template_asks_for_places_rating_and_status():
    prompt = build_prompt("Party")
    assert "8-10 specific places" in prompt
    assert "estimated rating" in prompt
    assert "if it's open" in prompt


def test_template_embeds_mood_guidance():
    prompt = build_prompt("Budget")
    assert "low cost ($ or $$)" in prompt
    assert "ambiance" in prompt
    assert "wifi/quiet" in prompt


def test_preset_context_is_appended_for_canned_moods():
    prompt = build_prompt("date night")
    assert "romantic ambience, dim lighting" in prompt


def test_free_text_mood_has_no_preset_hint():
    prompt = build_prompt("rainy afternoon reading")
    assert "Look for:" not in prompt


def test_find_preset_ignores_case_and_whitespace():
    preset = find_preset("  work mode ")
    assert preset is not None
    assert preset.id == "work"
    assert find_preset("unknown vibe") is None
