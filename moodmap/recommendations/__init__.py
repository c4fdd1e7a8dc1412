"""
Mood-based place recommendation pipeline.

Responsibilities:
- Build the grounding prompt from a mood (or a free-text vibe).
- Parse grounded Gemini responses into de-duplicated place records.
- Score and rank candidates with the Mood Intelligence Score.
- Cache ranked results per (mood, location) to avoid repeat AI calls.
"""
