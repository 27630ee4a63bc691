"""Piecewise-linear keyframe interpolation.

Maps a frame number (or any scalar, e.g. a spring value) to an output
value over ordered control points. Frames outside the keyframe domain
are handled by an extrapolation policy per side:

  - clamp:    hold the boundary output value.
  - extend:   continue the nearest segment's slope (extend-linear).
  - identity: return the input unchanged.

There is no default policy. Querying outside the domain without one is
a configuration error, so every out-of-range behavior is explicit.
"""

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Callable, Sequence

from .errors import ConfigurationError


EXTRAPOLATE_CLAMP = "clamp"
EXTRAPOLATE_EXTEND = "extend"
EXTRAPOLATE_IDENTITY = "identity"

VALID_EXTRAPOLATIONS = {EXTRAPOLATE_CLAMP, EXTRAPOLATE_EXTEND, EXTRAPOLATE_IDENTITY}


def validate_keyframes(inputs: Sequence[float], outputs: Sequence[float]) -> None:
    """Check that inputs/outputs form a usable keyframe set.

    Raises:
        ConfigurationError: Mismatched lengths, fewer than 2 points,
            non-finite values, or inputs not strictly increasing.
    """
    if len(inputs) != len(outputs):
        raise ConfigurationError(
            f"Keyframe inputs and outputs must have equal length, "
            f"got {len(inputs)} and {len(outputs)}"
        )
    if len(inputs) < 2:
        raise ConfigurationError(
            f"Keyframes need at least 2 points, got {len(inputs)}"
        )
    for i, (x, y) in enumerate(zip(inputs, outputs)):
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ConfigurationError(
                f"Keyframe {i} has a non-finite value: ({x!r}, {y!r})"
            )
    for i in range(len(inputs) - 1):
        if not inputs[i] < inputs[i + 1]:
            raise ConfigurationError(
                f"Keyframe inputs must be strictly increasing, "
                f"got {inputs[i]!r} then {inputs[i + 1]!r} at index {i + 1}"
            )


def _check_policy(policy: str | None, side: str) -> None:
    if policy is not None and policy not in VALID_EXTRAPOLATIONS:
        raise ConfigurationError(
            f"Invalid {side} extrapolation '{policy}'. "
            f"Valid: {sorted(VALID_EXTRAPOLATIONS)}"
        )


def _blend(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def interpolate(
    frame: float,
    inputs: Sequence[float],
    outputs: Sequence[float],
    extrapolate_left: str | None = None,
    extrapolate_right: str | None = None,
    easing: Callable[[float], float] | None = None,
) -> float:
    """Interpolate a value for *frame* over the keyframes.

    Inside the domain, the segment [inputs[i], inputs[i+1]] containing
    the frame is found, the normalized segment progress is passed
    through *easing* (if given), and outputs[i] / outputs[i+1] are
    blended linearly. Outside the domain the side's extrapolation
    policy applies; extend-linear uses the boundary segment's slope
    without easing.

    Args:
        frame: Query position (usually a frame number).
        inputs: Strictly increasing input thresholds.
        outputs: Output values, one per input.
        extrapolate_left: Policy for frame < inputs[0].
        extrapolate_right: Policy for frame > inputs[-1].
        easing: Optional curve applied to per-segment progress.

    Returns:
        Interpolated value as a float.

    Raises:
        ConfigurationError: Invalid keyframes or policy, non-finite
            frame, or out-of-domain frame with no policy for that side.
    """
    validate_keyframes(inputs, outputs)
    _check_policy(extrapolate_left, "left")
    _check_policy(extrapolate_right, "right")
    if not math.isfinite(frame):
        raise ConfigurationError(f"Cannot interpolate non-finite frame {frame!r}")

    if frame < inputs[0]:
        return _extrapolate(frame, inputs[0], inputs[1], outputs[0], outputs[1],
                            extrapolate_left, "left", inputs[0])
    if frame > inputs[-1]:
        return _extrapolate(frame, inputs[-2], inputs[-1], outputs[-2], outputs[-1],
                            extrapolate_right, "right", inputs[-1])

    # Segment index: last i with inputs[i] <= frame, capped so the
    # final input falls into the last segment.
    i = min(bisect_right(inputs, frame) - 1, len(inputs) - 2)
    x0, x1 = inputs[i], inputs[i + 1]
    t = (frame - x0) / (x1 - x0)
    if easing is not None:
        t = easing(t)
    return float(_blend(outputs[i], outputs[i + 1], t))


def _extrapolate(
    frame: float,
    x0: float, x1: float, y0: float, y1: float,
    policy: str | None,
    side: str,
    boundary: float,
) -> float:
    """Apply an extrapolation policy using the boundary segment (x0,y0)-(x1,y1)."""
    if policy is None:
        raise ConfigurationError(
            f"Frame {frame!r} is outside the keyframe domain on the {side} "
            f"(boundary {boundary!r}) and no {side} extrapolation was given"
        )
    if policy == EXTRAPOLATE_IDENTITY:
        return float(frame)
    if policy == EXTRAPOLATE_CLAMP:
        return float(y0 if side == "left" else y1)
    # extend: same line as the boundary segment.
    slope = (y1 - y0) / (x1 - x0)
    return float(y0 + slope * (frame - x0))


@dataclass(frozen=True)
class Keyframes:
    """A validated keyframe set with its extrapolation policies and easing."""

    inputs: tuple[float, ...]
    outputs: tuple[float, ...]
    extrapolate_left: str | None = None
    extrapolate_right: str | None = None
    easing: Callable[[float], float] | None = None

    def __post_init__(self):
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        validate_keyframes(self.inputs, self.outputs)
        _check_policy(self.extrapolate_left, "left")
        _check_policy(self.extrapolate_right, "right")

    @classmethod
    def clamped(cls, inputs, outputs, easing=None) -> "Keyframes":
        """Keyframes that hold their boundary values on both sides."""
        return cls(inputs, outputs, EXTRAPOLATE_CLAMP, EXTRAPOLATE_CLAMP, easing)

    def value_at(self, frame: float) -> float:
        return interpolate(
            frame, self.inputs, self.outputs,
            self.extrapolate_left, self.extrapolate_right, self.easing,
        )
