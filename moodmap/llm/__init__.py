"""
LLM integration layer.

Responsibilities:
- Manage Gemini API configuration and credentials.
- Call Gemini with Google Maps grounding anchored at the user's location.
- Translate SDK responses into a plain grounded-response shape.
- Surface upstream failures as ``UpstreamError``.
"""
