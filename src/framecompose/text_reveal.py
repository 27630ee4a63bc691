"""Typewriter-style text reveal and cursor blinking."""

import math

from .errors import ConfigurationError
from .keyframes import EXTRAPOLATE_CLAMP, interpolate


def _check_positive(name: str, value) -> None:
    if not isinstance(value, (int, float)) or not value > 0:
        raise ConfigurationError(f"{name} must be > 0, got {value!r}")


def reveal(text: str, elapsed_frames: float, frames_per_char: float) -> str:
    """Return the prefix of *text* typed after *elapsed_frames*.

    One character appears every frames_per_char frames, so
    reveal("HELLO", 5, 2) == "HE". Negative elapsed frames show nothing.
    """
    _check_positive("frames_per_char", frames_per_char)
    if elapsed_frames < 0:
        return ""
    count = min(math.floor(elapsed_frames / frames_per_char), len(text))
    return text[:count]


def reveal_end_frame(text: str, frames_per_char: float) -> int:
    """First elapsed frame at which the whole of *text* is visible."""
    _check_positive("frames_per_char", frames_per_char)
    return math.ceil(len(text) * frames_per_char)


def cursor_visible(frame: int, cycle_length: int) -> bool:
    """Square-wave blink: visible for the first half of every cycle."""
    _check_positive("cycle_length", cycle_length)
    return (frame % cycle_length) < cycle_length / 2


def cursor_opacity(frame: int, cycle_length: int) -> float:
    """Soft blink: opacity fades 1 -> 0 -> 1 over each cycle."""
    _check_positive("cycle_length", cycle_length)
    phase = frame % cycle_length
    return interpolate(
        phase,
        [0, cycle_length / 2, cycle_length],
        [1.0, 0.0, 1.0],
        EXTRAPOLATE_CLAMP, EXTRAPOLATE_CLAMP,
    )
