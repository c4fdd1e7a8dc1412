from __future__ import annotations

from .moods import find_preset

PROMPT_TEMPLATE = """\
I am in a "{mood}" mood.
Find 8-10 specific places near me that fit this mood perfectly.
For each place, provide a very brief reason why it fits the mood, \
its estimated rating (e.g. 4.5), and if it's open.

Requirements:
- Prioritize high-rated places.
- If the mood is "Budget", prioritize low cost ($ or $$).
- If the mood is "Date", prioritize ambiance.
- If the mood is "Work", prioritize wifi/quiet."""


def build_prompt(mood: str, custom_prompt: str | None = None) -> str:
    """Return the instruction sent to the grounding model.

    A non-empty *custom_prompt* (the user's own "vibe") is used verbatim.
    """
    if custom_prompt and custom_prompt.strip():
        return custom_prompt

    prompt = PROMPT_TEMPLATE.format(mood=mood)
    preset = find_preset(mood)
    if preset is not None:
        prompt += f"\n- Look for: {preset.prompt_context}."
    return prompt
