"""Error types raised by the framecompose engine.

All are ValueError subclasses so manifest and CLI code that already
catches ValueError keeps working unchanged.
"""


class ConfigurationError(ValueError):
    """Malformed keyframes, spring parameters, or manifest fields."""


class DurationError(ValueError):
    """A resolved scene cannot host the transition window(s) touching it."""


class FrameRangeError(ValueError):
    """A requested frame or frame range lies outside the timeline."""
