"""Per-kind scene parameters.

Each scene kind has a frozen parameter struct with its defaults written
out below, and an explicit parser that checks a manifest dict against
it. The struct doubles as the scene's renderer reference on the
timeline: scenes.render_scene dispatches on its `kind`.

Kinds:
  title       large title, optional subtitle, spring entrance.
  list        title (rising on a spring) and optional subtitle, then
              staggered checklist items.
  typewriter  text typed out with a cursor, then a response card.
"""

from dataclasses import dataclass
from typing import ClassVar

from .errors import ConfigurationError
from .spring import SpringConfig


# Scene keys that belong to the timeline, not to the kind parameters.
TIMELINE_KEYS = {
    "id", "kind", "frames", "seconds",
    "transition", "transition_sec", "transition_type",
    "direction", "push", "easing",
}

# Smooth, non-bouncing entrance (critically damped, zeta = 1).
SMOOTH_SPRING = SpringConfig(damping=20.0)


@dataclass(frozen=True)
class TitleParams:
    kind: ClassVar[str] = "title"

    title: str
    subtitle: str | None = None
    gradient: str = "primary"
    fade_frames: int = 20
    subtitle_delay: int = 15
    rise_px: float = 50.0
    spring: SpringConfig = SMOOTH_SPRING


@dataclass(frozen=True)
class ListParams:
    kind: ClassVar[str] = "list"

    title: str
    items: tuple[str, ...]
    subtitle: str | None = None
    gradient: str = "success"
    fade_frames: int = 20
    subtitle_delay: int = 15
    rise_px: float = 50.0
    item_delay: int = 30
    item_stagger: int = 12
    item_fade: int = 15
    item_shift_px: float = -30.0
    spring: SpringConfig = SMOOTH_SPRING


@dataclass(frozen=True)
class TypewriterParams:
    kind: ClassVar[str] = "typewriter"

    text: str
    response: str | None = None
    prompt_label: str = "You:"
    response_label: str = "AI:"
    gradient: str = "dark"
    frames_per_char: float = 2
    cursor_cycle: int = 20
    cursor_style: str = "fade"
    response_gap: int = 15
    response_fade: int = 20
    spring: SpringConfig = SMOOTH_SPRING


VALID_CURSOR_STYLES = {"blink", "fade"}


# ── Field checks ──────────────────────────────────────────────────


def _require(raw: dict, key: str, prefix: str):
    if key not in raw:
        raise ConfigurationError(f"{prefix}: missing required field '{key}'")
    return raw[key]


def _string(value, key: str, prefix: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{prefix}: '{key}' must be a non-empty string")
    return value


def _number(value, key: str, prefix: str, positive: bool = False) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ConfigurationError(f"{prefix}: '{key}' must be a number, got {value!r}")
    if positive and value <= 0:
        raise ConfigurationError(f"{prefix}: '{key}' must be > 0, got {value!r}")
    return value


def _frames(value, key: str, prefix: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ConfigurationError(
            f"{prefix}: '{key}' must be an integer >= 0, got {value!r}"
        )
    return value


def _positive_frames(value, key: str, prefix: str) -> int:
    if _frames(value, key, prefix) == 0:
        raise ConfigurationError(f"{prefix}: '{key}' must be > 0")
    return value


def _check_keys(raw: dict, allowed: set[str], prefix: str) -> None:
    unknown = set(raw) - allowed - TIMELINE_KEYS
    if unknown:
        raise ConfigurationError(
            f"{prefix}: unknown field(s) {sorted(unknown)}. "
            f"Valid: {sorted(allowed)}"
        )


def parse_spring(raw, prefix: str, default: SpringConfig = SMOOTH_SPRING) -> SpringConfig:
    """Parse an optional spring override dict on top of *default*."""
    if raw is None:
        return default
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{prefix}: 'spring' must be a mapping")
    allowed = {"mass", "stiffness", "damping", "initial_velocity", "overshoot_clamping"}
    unknown = set(raw) - allowed
    if unknown:
        raise ConfigurationError(
            f"{prefix}: unknown spring field(s) {sorted(unknown)}. Valid: {sorted(allowed)}"
        )
    try:
        return SpringConfig(
            mass=raw.get("mass", default.mass),
            stiffness=raw.get("stiffness", default.stiffness),
            damping=raw.get("damping", default.damping),
            initial_velocity=raw.get("initial_velocity", default.initial_velocity),
            overshoot_clamping=bool(raw.get("overshoot_clamping", default.overshoot_clamping)),
        )
    except ConfigurationError as e:
        raise ConfigurationError(f"{prefix}: {e}") from e


# ── Per-kind parsers ──────────────────────────────────────────────


def _parse_title(raw: dict, prefix: str) -> TitleParams:
    _check_keys(raw, {"title", "subtitle", "gradient", "fade_frames",
                      "subtitle_delay", "rise_px", "spring"}, prefix)
    subtitle = raw.get("subtitle")
    return TitleParams(
        title=_string(_require(raw, "title", prefix), "title", prefix),
        subtitle=_string(subtitle, "subtitle", prefix) if subtitle is not None else None,
        gradient=_string(raw.get("gradient", "primary"), "gradient", prefix),
        fade_frames=_positive_frames(raw.get("fade_frames", 20), "fade_frames", prefix),
        subtitle_delay=_frames(raw.get("subtitle_delay", 15), "subtitle_delay", prefix),
        rise_px=_number(raw.get("rise_px", 50.0), "rise_px", prefix),
        spring=parse_spring(raw.get("spring"), prefix),
    )


def _parse_list(raw: dict, prefix: str) -> ListParams:
    _check_keys(raw, {"title", "subtitle", "items", "gradient", "fade_frames",
                      "subtitle_delay", "rise_px", "item_delay", "item_stagger",
                      "item_fade", "item_shift_px", "spring"}, prefix)
    items = _require(raw, "items", prefix)
    subtitle = raw.get("subtitle")
    if not isinstance(items, list) or not items:
        raise ConfigurationError(f"{prefix}: 'items' must be a non-empty list")
    for j, item in enumerate(items):
        _string(item, f"items[{j}]", prefix)
    return ListParams(
        title=_string(_require(raw, "title", prefix), "title", prefix),
        subtitle=_string(subtitle, "subtitle", prefix) if subtitle is not None else None,
        items=tuple(items),
        gradient=_string(raw.get("gradient", "success"), "gradient", prefix),
        fade_frames=_positive_frames(raw.get("fade_frames", 20), "fade_frames", prefix),
        subtitle_delay=_frames(raw.get("subtitle_delay", 15), "subtitle_delay", prefix),
        rise_px=_number(raw.get("rise_px", 50.0), "rise_px", prefix),
        item_delay=_frames(raw.get("item_delay", 30), "item_delay", prefix),
        item_stagger=_frames(raw.get("item_stagger", 12), "item_stagger", prefix),
        item_fade=_positive_frames(raw.get("item_fade", 15), "item_fade", prefix),
        item_shift_px=_number(raw.get("item_shift_px", -30.0), "item_shift_px", prefix),
        spring=parse_spring(raw.get("spring"), prefix),
    )


def _parse_typewriter(raw: dict, prefix: str) -> TypewriterParams:
    _check_keys(raw, {"text", "response", "prompt_label", "response_label",
                      "gradient", "frames_per_char", "cursor_cycle", "cursor_style",
                      "response_gap", "response_fade", "spring"}, prefix)
    response = raw.get("response")
    cursor_style = raw.get("cursor_style", "fade")
    if cursor_style not in VALID_CURSOR_STYLES:
        raise ConfigurationError(
            f"{prefix}: invalid cursor_style '{cursor_style}'. "
            f"Valid: {sorted(VALID_CURSOR_STYLES)}"
        )
    cursor_cycle = _positive_frames(raw.get("cursor_cycle", 20), "cursor_cycle", prefix)
    return TypewriterParams(
        text=_string(_require(raw, "text", prefix), "text", prefix),
        response=_string(response, "response", prefix) if response is not None else None,
        prompt_label=str(raw.get("prompt_label", "You:")),
        response_label=str(raw.get("response_label", "AI:")),
        gradient=_string(raw.get("gradient", "dark"), "gradient", prefix),
        frames_per_char=_number(raw.get("frames_per_char", 2), "frames_per_char",
                                prefix, positive=True),
        cursor_cycle=cursor_cycle,
        cursor_style=cursor_style,
        response_gap=_frames(raw.get("response_gap", 15), "response_gap", prefix),
        response_fade=_positive_frames(raw.get("response_fade", 20), "response_fade", prefix),
        spring=parse_spring(raw.get("spring"), prefix),
    )


PARAM_PARSERS = {
    "title": _parse_title,
    "list": _parse_list,
    "typewriter": _parse_typewriter,
}

VALID_KINDS = set(PARAM_PARSERS)


def parse_scene_params(raw: dict, index: int):
    """Parse the kind-specific parameters of manifest scene *index*.

    Raises:
        ConfigurationError: Unknown kind, missing/unknown fields, bad types.
    """
    kind = raw.get("kind")
    if kind not in PARAM_PARSERS:
        raise ConfigurationError(
            f"Scene {index}: unknown kind '{kind}'. Valid: {sorted(VALID_KINDS)}"
        )
    return PARAM_PARSERS[kind](raw, f"Scene {index} ({kind})")
