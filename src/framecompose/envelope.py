"""Audio gain envelopes anchored to the timeline length.

The fade-out start is derived from total_frames on every call, so
changing the video length never leaves the music cut off mid-fade or
fading out early.
"""

import math

import numpy as np

from .errors import ConfigurationError
from .keyframes import EXTRAPOLATE_CLAMP, interpolate


def envelope_points(
    total_frames: int,
    fade_in_frames: int,
    fade_out_frames: int,
    target_gain: float,
) -> list[tuple[float, float]]:
    """Control points for a fade-in / hold / fade-out gain curve.

    Normally (0, 0), (fade_in, gain), (total - fade_out, gain), (total, 0).
    A zero-length fade drops its ramp, and fades that meet exactly share
    a single peak point.

    Raises:
        ConfigurationError: Non-positive total, negative fades or gain,
            or fades longer than the timeline combined.
    """
    if not isinstance(total_frames, (int, float)) or not total_frames > 0:
        raise ConfigurationError(f"total_frames must be > 0, got {total_frames!r}")
    if fade_in_frames < 0 or fade_out_frames < 0:
        raise ConfigurationError(
            f"Fade lengths must be >= 0, got in={fade_in_frames!r} "
            f"out={fade_out_frames!r}"
        )
    if not math.isfinite(target_gain) or target_gain < 0:
        raise ConfigurationError(f"target_gain must be >= 0, got {target_gain!r}")
    if fade_in_frames + fade_out_frames > total_frames:
        raise ConfigurationError(
            f"Fade in ({fade_in_frames}) + fade out ({fade_out_frames}) "
            f"exceeds total length {total_frames}"
        )

    points = []
    if fade_in_frames > 0:
        points.append((0, 0.0))
    points.append((fade_in_frames, target_gain))
    fade_out_start = total_frames - fade_out_frames
    if fade_out_start > fade_in_frames:
        points.append((fade_out_start, target_gain))
    if fade_out_frames > 0:
        points.append((total_frames, 0.0))
    else:
        # No fade-out: hold the gain through the final frame.
        if points[-1][0] < total_frames:
            points.append((total_frames, target_gain))
    return points


def gain_at(
    frame: float,
    total_frames: int,
    fade_in_frames: int,
    fade_out_frames: int,
    target_gain: float,
) -> float:
    """Gain at *frame*, clamped to the envelope's end values outside it."""
    points = envelope_points(total_frames, fade_in_frames, fade_out_frames, target_gain)
    inputs = [p[0] for p in points]
    outputs = [p[1] for p in points]
    return interpolate(frame, inputs, outputs, EXTRAPOLATE_CLAMP, EXTRAPOLATE_CLAMP)


def gain_curve(
    total_frames: int,
    fade_in_frames: int,
    fade_out_frames: int,
    target_gain: float,
) -> np.ndarray:
    """Per-frame gains for frames 0..total_frames-1 as a float64 array."""
    return np.array(
        [
            gain_at(f, total_frames, fade_in_frames, fade_out_frames, target_gain)
            for f in range(int(total_frames))
        ],
        dtype=np.float64,
    )
