from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MoodPreset:
    id: str
    label: str
    prompt_context: str


MOOD_PRESETS: list[MoodPreset] = [
    MoodPreset("work", "Work Mode", "quiet places with wifi and coffee"),
    MoodPreset("date", "Date Night", "romantic ambience, dim lighting"),
    MoodPreset("quick_bite", "Quick Bite", "fast service, good food"),
    MoodPreset("budget", "Budget", "cheap eats, good value"),
    MoodPreset("cozy", "Cozy", "comfortable seating, warm atmosphere"),
    MoodPreset("party", "Party", "lively music, drinks, crowd"),
]

_PRESETS_BY_LABEL = {p.label.lower(): p for p in MOOD_PRESETS}


def find_preset(mood: str) -> MoodPreset | None:
    """Return the canned preset whose label matches *mood*, ignoring case."""
    return _PRESETS_BY_LABEL.get(mood.strip().lower())
