"""Easing curves for normalized progress in [0, 1].

Base curves are "ease-in" shaped (slow start). Wrap them with ease_out
or ease_in_out to get the other variants, e.g. ease_out(quad) is the
usual decelerating slide-in curve.
"""

import math
from typing import Callable

from .errors import ConfigurationError

Easing = Callable[[float], float]


def linear(t: float) -> float:
    return t


def quad(t: float) -> float:
    return t * t


def cubic(t: float) -> float:
    return t * t * t


def sin(t: float) -> float:
    return 1 - math.cos(t * math.pi / 2)


def circle(t: float) -> float:
    return 1 - math.sqrt(max(0.0, 1 - t * t))


def exp(t: float) -> float:
    if t <= 0:
        return 0.0
    return 2 ** (10 * (t - 1))


def ease_in(fn: Easing) -> Easing:
    """Run an easing curve forwards (identity wrapper, for readability)."""
    return fn


def ease_out(fn: Easing) -> Easing:
    """Mirror an easing curve so it starts fast and settles slowly."""
    def _out(t: float) -> float:
        return 1 - fn(1 - t)
    return _out


def ease_in_out(fn: Easing) -> Easing:
    """Ease in over the first half, mirror over the second half."""
    def _in_out(t: float) -> float:
        if t < 0.5:
            return fn(t * 2) / 2
        return 1 - fn((1 - t) * 2) / 2
    return _in_out


# ── Name lookup ─────────────────────────────────────────────────────
# Manifests refer to easings as "quad", "in-quad", "out-cubic",
# "in-out-sin". A bare curve name means the ease-in form.

BASE_CURVES = {
    "linear": linear,
    "quad": quad,
    "cubic": cubic,
    "sin": sin,
    "circle": circle,
    "exp": exp,
}

_MODES = {
    "in": ease_in,
    "out": ease_out,
    "in-out": ease_in_out,
}


def get_easing(name: str) -> Easing:
    """Resolve an easing name to a callable.

    Raises:
        ConfigurationError: Unknown curve or mode.
    """
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"Easing name must be a non-empty string, got {name!r}")

    for prefix in ("in-out-", "out-", "in-"):
        if name.startswith(prefix):
            mode = prefix[:-1]
            curve = name[len(prefix):]
            break
    else:
        mode, curve = "in", name

    if curve not in BASE_CURVES:
        raise ConfigurationError(
            f"Unknown easing '{name}'. "
            f"Valid curves: {sorted(BASE_CURVES)}, modes: {sorted(_MODES)}"
        )
    return _MODES[mode](BASE_CURVES[curve])
