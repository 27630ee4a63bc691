"""Timeline manifest loader.

Parses YAML manifests that declare a video's scenes, the transitions
between them, and the audio bed, then hands them to the timeline
composer.

Manifest schema:
  video:
    fps: 30
    resolution: [1920, 1080]
    duration: 780               # frames (or duration_sec: 26)
    background: "#1A1A2E"
    transition: 15              # default transition frames (or transition_sec); 0 if omitted
    transition_type: fade       # default: "fade" or "slide"
  paths:
    assets: "/path/to/assets"
  colors:
    text: "#FFFFFF"
  gradients:
    primary: ["#155F6C", "#365D83"]
  audio:
    src: "${assets}/music.mp3"
    fade_in: 30                 # frames (or fade_in_sec)
    fade_out: 45                # frames (or fade_out_sec)
    gain: 0.35
  scenes:
    - id: hero
      kind: title               # title | list | typewriter
      frames: 120               # or seconds: 4
      title: "Welcome"
      transition: 15            # outgoing, per-scene override
      transition_type: slide
      direction: from-right
      push: false
      easing: out-quad

The transition fields on each scene control its *outgoing* transition
(into the next scene). The last scene's transition fields are ignored.
"""

from pathlib import Path

import yaml

from .common import parse_color_value, resolve_path_vars
from .easing import get_easing
from .errors import ConfigurationError
from .params import parse_scene_params
from .timeline import (
    ResolvedTimeline,
    Scene,
    Transition,
    build_timeline,
    seconds_to_frames,
)
from .transitions import VALID_DIRECTIONS, VALID_KINDS as VALID_TRANSITION_TYPES


DEFAULT_RESOLUTION = (1920, 1080)
DEFAULT_BACKGROUND = "#1A1A2E"

DEFAULT_COLORS = {
    "text": "#FFFFFF",
    "text_secondary": "#E6E6E6",
    "accent": "#FFDD6F",
    "highlight": "#73C1BD",
    "card": "#155F6C",
}

DEFAULT_GRADIENTS = {
    "primary": ["#155F6C", "#365D83"],
    "success": ["#89975D", "#155F6C"],
    "dark": ["#1A1A2E", "#155F6C"],
    "warm": ["#DD6A48", "#9D4254"],
    "energy": ["#DD6A48", "#FFDD6F"],
    "gold": ["#FFDD6F", "#DD6A48"],
}


# ── Manifest loading ──────────────────────────────────────────────


def load_timeline_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a timeline manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Validate video settings; convert seconds to frames.
      3. Parse colors and gradients to RGB tuples (defaults merged in).
      4. Resolve ${path} variables in the audio source.
      5. Parse each scene's kind parameters and outgoing transition.

    Args:
        manifest_path: Path to the YAML manifest file.

    Returns:
        Config dict with video, colors, gradients, audio (or None),
        scenes (list of Scene) and transitions (list of Transition).

    Raises:
        ConfigurationError: Missing/invalid fields.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ConfigurationError("Timeline manifest: top level must be a mapping")
    if "video" not in raw:
        raise ConfigurationError("Timeline manifest: missing required 'video' section")

    video = _parse_video(raw["video"])
    paths = raw.get("paths", {})

    colors = {}
    for key, value in {**DEFAULT_COLORS, **raw.get("colors", {})}.items():
        try:
            colors[key] = parse_color_value(value)
        except ValueError as e:
            raise ConfigurationError(f"colors.{key}: {e}") from e

    gradients = {}
    for key, value in {**DEFAULT_GRADIENTS, **raw.get("gradients", {})}.items():
        if not isinstance(value, list) or len(value) != 2:
            raise ConfigurationError(
                f"gradients.{key}: must be a list of 2 colors, got {value!r}"
            )
        try:
            gradients[key] = (parse_color_value(value[0]), parse_color_value(value[1]))
        except ValueError as e:
            raise ConfigurationError(f"gradients.{key}: {e}") from e

    audio = _parse_audio(raw.get("audio"), video, paths)

    scenes, transitions = _parse_scenes(raw.get("scenes", []), video, gradients)

    return {
        "video": video,
        "colors": colors,
        "gradients": gradients,
        "audio": audio,
        "scenes": scenes,
        "transitions": transitions,
    }


def build_from_manifest(config: dict) -> ResolvedTimeline:
    """Build the resolved timeline for a loaded manifest config."""
    video = config["video"]
    return build_timeline(
        config["scenes"], config["transitions"],
        video["duration"], video["fps"],
    )


# ── Section parsers ───────────────────────────────────────────────


def _frames_or_seconds(raw: dict, key: str, fps: float, prefix: str,
                       required: bool = True, default: int | None = None):
    """Read `key` (frames) or `key_sec` / `seconds` (converted with fps)."""
    sec_key = "seconds" if key == "frames" else f"{key}_sec"
    if key in raw and sec_key in raw:
        raise ConfigurationError(f"{prefix}: give either '{key}' or '{sec_key}', not both")
    if key in raw:
        value = raw[key]
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigurationError(
                f"{prefix}: '{key}' must be a whole number of frames, got {value!r}"
            )
        return value
    if sec_key in raw:
        value = raw[sec_key]
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ConfigurationError(
                f"{prefix}: '{sec_key}' must be a number of seconds, got {value!r}"
            )
        return seconds_to_frames(value, fps)
    if required:
        raise ConfigurationError(f"{prefix}: missing required field '{key}' (or '{sec_key}')")
    return default


def _parse_video(video) -> dict:
    """Validate the video block and normalize it to frames."""
    prefix = "Timeline manifest: video"
    if not isinstance(video, dict):
        raise ConfigurationError(f"{prefix} must be a mapping")
    video = dict(video)

    fps = video.get("fps")
    if not isinstance(fps, (int, float)) or isinstance(fps, bool) or fps <= 0:
        raise ConfigurationError(f"{prefix}.fps must be a positive number, got {fps!r}")

    resolution = video.get("resolution", list(DEFAULT_RESOLUTION))
    if (
        not isinstance(resolution, (list, tuple)) or len(resolution) != 2
        or not all(isinstance(v, int) and v > 0 for v in resolution)
    ):
        raise ConfigurationError(
            f"{prefix}.resolution must be [width, height], got {resolution!r}"
        )
    video["resolution"] = tuple(resolution)

    try:
        video["background"] = parse_color_value(video.get("background", DEFAULT_BACKGROUND))
    except ValueError as e:
        raise ConfigurationError(f"{prefix}.background: {e}") from e

    video["duration"] = _frames_or_seconds(video, "duration", fps, prefix)
    if video["duration"] < 1:
        raise ConfigurationError(f"{prefix}.duration must be >= 1 frame")
    video.pop("duration_sec", None)

    transition = _frames_or_seconds(video, "transition", fps, prefix,
                                    required=False, default=0)
    if transition < 0:
        raise ConfigurationError(f"{prefix}.transition must be >= 0, got {transition!r}")
    video["transition"] = transition
    video.pop("transition_sec", None)

    transition_type = video.get("transition_type", "fade")
    if transition_type not in VALID_TRANSITION_TYPES:
        raise ConfigurationError(
            f"{prefix}: invalid transition_type '{transition_type}'. "
            f"Valid: {sorted(VALID_TRANSITION_TYPES)}"
        )
    video["transition_type"] = transition_type
    return video


def _parse_audio(audio, video: dict, paths: dict) -> dict | None:
    """Validate the optional audio block. Fades are normalized to frames."""
    if audio is None:
        return None
    prefix = "Timeline manifest: audio"
    if not isinstance(audio, dict):
        raise ConfigurationError(f"{prefix} must be a mapping")
    fps = video["fps"]

    parsed = {}
    src = audio.get("src")
    if src is not None:
        try:
            parsed["src"] = resolve_path_vars(str(src), paths)
        except ValueError as e:
            raise ConfigurationError(f"{prefix}.src: {e}") from e
    parsed["fade_in"] = _frames_or_seconds(audio, "fade_in", fps, prefix,
                                           required=False, default=0)
    parsed["fade_out"] = _frames_or_seconds(audio, "fade_out", fps, prefix,
                                            required=False, default=0)
    gain = audio.get("gain", 1.0)
    if not isinstance(gain, (int, float)) or isinstance(gain, bool) or gain < 0:
        raise ConfigurationError(f"{prefix}.gain must be >= 0, got {gain!r}")
    parsed["gain"] = float(gain)

    if parsed["fade_in"] < 0 or parsed["fade_out"] < 0:
        raise ConfigurationError(f"{prefix}: fades must be >= 0")
    if parsed["fade_in"] + parsed["fade_out"] > video["duration"]:
        raise ConfigurationError(
            f"{prefix}: fade_in + fade_out ({parsed['fade_in']} + {parsed['fade_out']}) "
            f"exceeds video duration {video['duration']}"
        )
    return parsed


def _parse_transition(section: dict, index: int, video: dict) -> Transition:
    """Outgoing transition of scene *index*, with video-level defaults applied."""
    prefix = f"Scene {index}"
    frames = _frames_or_seconds(section, "transition", video["fps"], prefix,
                                required=False, default=video["transition"])
    if frames < 0:
        raise ConfigurationError(f"{prefix}: transition must be >= 0, got {frames!r}")

    kind = section.get("transition_type", video["transition_type"])
    if kind not in VALID_TRANSITION_TYPES:
        raise ConfigurationError(
            f"{prefix}: invalid transition_type '{kind}'. "
            f"Valid: {sorted(VALID_TRANSITION_TYPES)}"
        )

    direction = section.get("direction")
    if direction is not None:
        if kind != "slide":
            raise ConfigurationError(f"{prefix}: 'direction' only applies to slide transitions")
        if direction not in VALID_DIRECTIONS:
            raise ConfigurationError(
                f"{prefix}: invalid direction '{direction}'. "
                f"Valid: {sorted(VALID_DIRECTIONS)}"
            )

    push = section.get("push", False)
    if not isinstance(push, bool):
        raise ConfigurationError(f"{prefix}: 'push' must be true or false")

    easing = section.get("easing")
    if easing is not None:
        try:
            get_easing(easing)
        except ConfigurationError as e:
            raise ConfigurationError(f"{prefix}: {e}") from e

    return Transition(frames=frames, kind=kind, direction=direction, push=push, easing=easing)


def _parse_scenes(raw_scenes, video: dict, gradients: dict) -> tuple[list, list]:
    """Parse scenes and the transitions between them."""
    if not isinstance(raw_scenes, list) or not raw_scenes:
        raise ConfigurationError("Timeline manifest: 'scenes' must be a non-empty list")

    scenes = []
    transitions = []
    ids_seen = {}
    for i, section in enumerate(raw_scenes):
        if not isinstance(section, dict):
            raise ConfigurationError(f"Scene {i}: must be a mapping")

        scene_id = section.get("id", f"scene-{i:02d}")
        if not isinstance(scene_id, str) or not scene_id.strip():
            raise ConfigurationError(f"Scene {i}: 'id' must be a non-empty string")
        if scene_id in ids_seen:
            raise ConfigurationError(
                f"Scene {i}: duplicate id '{scene_id}' "
                f"(also used by scene {ids_seen[scene_id]})"
            )
        ids_seen[scene_id] = i

        params = parse_scene_params(section, i)
        if params.gradient not in gradients:
            raise ConfigurationError(
                f"Scene {i} ({params.kind}): unknown gradient '{params.gradient}'. "
                f"Valid: {sorted(gradients)}"
            )

        frames = _frames_or_seconds(section, "frames", video["fps"], f"Scene {i}")
        if frames < 1:
            raise ConfigurationError(f"Scene {i}: frames must be >= 1, got {frames!r}")
        scenes.append(Scene(id=scene_id, frames=frames, renderer=params))

        if i < len(raw_scenes) - 1:
            transitions.append(_parse_transition(section, i, video))

    return scenes, transitions
