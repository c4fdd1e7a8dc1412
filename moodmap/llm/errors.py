from __future__ import annotations


class UpstreamError(RuntimeError):
    """The grounding service was unreachable, timed out, or returned no candidates."""


class ConfigurationError(RuntimeError):
    """The grounding client cannot be built, e.g. the API key is missing."""
