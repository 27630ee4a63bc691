"""Damped-spring motion curves.

A spring is the unit step response of a damped harmonic oscillator:
displacement starts at 0 with velocity v0 and settles at 1. It is
evaluated in closed form at continuous time t = frames / fps, so the
value at any frame depends only on that frame and the configuration.

Damping ratio zeta = damping / (2 * sqrt(mass * stiffness)) picks the
solution:

  zeta < 1   under-damped:  e^(-zeta*w0*t) * (A cos(wd t) + B sin(wd t))
  zeta == 1  critical:      e^(-w0*t) * (A + B t)
  zeta > 1   over-damped:   C1 e^(r1 t) + C2 e^(r2 t)

each added to the target 1, with w0 = sqrt(stiffness / mass).
"""

import math
from dataclasses import dataclass

from .errors import ConfigurationError


# Frames searched by measure_spring before giving up (one minute at 60fps).
MAX_SETTLE_FRAMES = 3600

DEFAULT_SETTLE_THRESHOLD = 0.005


@dataclass(frozen=True)
class SpringConfig:
    """Physical parameters of a spring.

    The defaults give a lively, slightly bouncy motion (zeta = 0.5).
    Raising damping to 2*sqrt(mass*stiffness) removes the bounce;
    e.g. damping=20 gives the fastest non-overshooting ease (zeta = 1).
    Much higher damping over-damps and settles slowly.
    """

    mass: float = 1.0
    stiffness: float = 100.0
    damping: float = 10.0
    initial_velocity: float = 0.0
    overshoot_clamping: bool = False

    def __post_init__(self):
        validate_spring_config(self)


def validate_spring_config(config: SpringConfig) -> None:
    """Raise ConfigurationError for non-physical spring parameters."""
    for name in ("mass", "stiffness", "damping", "initial_velocity"):
        value = getattr(config, name)
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ConfigurationError(
                f"Spring {name} must be a finite number, got {value!r}"
            )
    if config.mass <= 0:
        raise ConfigurationError(f"Spring mass must be > 0, got {config.mass!r}")
    if config.stiffness <= 0:
        raise ConfigurationError(
            f"Spring stiffness must be > 0, got {config.stiffness!r}"
        )
    if config.damping < 0:
        raise ConfigurationError(
            f"Spring damping must be >= 0, got {config.damping!r}"
        )


def damping_ratio(config: SpringConfig) -> float:
    return config.damping / (2 * math.sqrt(config.mass * config.stiffness))


def damping_regime(config: SpringConfig) -> str:
    """Return "under", "critical", or "over" for the config's damping ratio."""
    zeta = damping_ratio(config)
    if math.isclose(zeta, 1.0, rel_tol=1e-9):
        return "critical"
    return "under" if zeta < 1 else "over"


def _unit_response(t: float, config: SpringConfig) -> float:
    """Displacement at time t (seconds) for a 0 -> 1 step."""
    w0 = math.sqrt(config.stiffness / config.mass)
    zeta = damping_ratio(config)
    v0 = config.initial_velocity
    regime = damping_regime(config)

    # Work in y = x - 1, so y(0) = -1 and y'(0) = v0.
    if regime == "under":
        wd = w0 * math.sqrt(1 - zeta * zeta)
        a = -1.0
        b = (v0 + zeta * w0 * a) / wd
        y = math.exp(-zeta * w0 * t) * (a * math.cos(wd * t) + b * math.sin(wd * t))
    elif regime == "critical":
        a = -1.0
        b = v0 + w0 * a
        y = math.exp(-w0 * t) * (a + b * t)
    else:
        root = math.sqrt(zeta * zeta - 1)
        r1 = -w0 * (zeta - root)
        r2 = -w0 * (zeta + root)
        c1 = (v0 + r2) / (r1 - r2)
        c2 = -1.0 - c1
        y = c1 * math.exp(r1 * t) + c2 * math.exp(r2 * t)
    return 1.0 + y


def spring_value(
    elapsed_frames: float,
    fps: float,
    config: SpringConfig | None = None,
) -> float:
    """Evaluate the unit spring at *elapsed_frames* after its start.

    Args:
        elapsed_frames: Frames since the motion started. Negative means
            the motion has not started yet and yields 0.
        fps: Frame rate used to convert frames to seconds.
        config: Spring parameters (defaults to SpringConfig()).

    Returns:
        Displacement, 0 at the start and settling at 1.

    Raises:
        ConfigurationError: fps <= 0 or non-finite elapsed_frames.
    """
    if config is None:
        config = SpringConfig()
    if not isinstance(fps, (int, float)) or not fps > 0:
        raise ConfigurationError(f"fps must be > 0, got {fps!r}")
    if not math.isfinite(elapsed_frames):
        raise ConfigurationError(
            f"elapsed_frames must be finite, got {elapsed_frames!r}"
        )
    if elapsed_frames < 0:
        return 0.0

    value = _unit_response(elapsed_frames / fps, config)
    if config.overshoot_clamping and value > 1.0:
        return 1.0
    return value


def spring(
    frame: float,
    fps: float,
    config: SpringConfig | None = None,
    delay: float = 0,
    from_value: float = 0.0,
    to_value: float = 1.0,
) -> float:
    """Spring from *from_value* to *to_value*, starting *delay* frames in.

    Scene code passes its local frame here; before the delay the value
    holds at from_value.
    """
    progress = spring_value(frame - delay, fps, config)
    return from_value + (to_value - from_value) * progress


def measure_spring(
    fps: float,
    config: SpringConfig | None = None,
    threshold: float = DEFAULT_SETTLE_THRESHOLD,
    max_frames: int = MAX_SETTLE_FRAMES,
) -> int:
    """Number of frames until the spring stays within *threshold* of 1.

    Useful for sizing a scene so its entrance animation finishes before
    the outgoing transition starts.

    Raises:
        ConfigurationError: threshold <= 0, or the spring has not
            settled within max_frames (e.g. zero damping).
    """
    if not threshold > 0:
        raise ConfigurationError(f"threshold must be > 0, got {threshold!r}")

    last_outside = -1
    for frame in range(max_frames + 1):
        if abs(spring_value(frame, fps, config) - 1.0) > threshold:
            last_outside = frame

    if last_outside == max_frames:
        raise ConfigurationError(
            f"Spring does not settle within {max_frames} frames "
            f"(threshold {threshold})"
        )
    return last_outside + 1
