"""Timeline composition — scenes, transitions, and per-frame lookup.

Scenes are laid out left to right. Each transition's window is carved
out of its two neighbours: the last N frames of the outgoing scene
overlap the first N frames of the incoming scene. Scene spans keep
their full length; only queries inside a window see both scenes.

The total length is fixed up front. Whatever the requested scene
lengths add up to, the last scene absorbs the difference:

    naive = sum(requested) - sum(transition frames)
    last  = last.requested + (total_frames - naive)

so the timeline always ends exactly on total_frames.

Building validates everything and either returns a complete
ResolvedTimeline or raises. Querying is a stateless binary search over
the resolved starts, safe to call in any order from any process.
"""

import logging
import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Sequence

from .easing import get_easing
from .errors import ConfigurationError, DurationError, FrameRangeError
from .transitions import CompositeParams, VALID_KINDS, composite, normalize_direction

logger = logging.getLogger(__name__)


# ── Declared types ────────────────────────────────────────────────


@dataclass(frozen=True)
class Scene:
    """A unit of content with a requested length in frames.

    renderer is opaque to the timeline; typically a parameter struct
    that a scene renderer knows how to draw.
    """

    id: str
    frames: int
    renderer: Any = None


@dataclass(frozen=True)
class Transition:
    """A fixed-length window blending two adjacent scenes.

    frames == 0 is a hard cut. easing (a name such as "out-quad") only
    shapes the progress handed to the presentation; the reported linear
    progress is unaffected.
    """

    frames: int
    kind: str = "fade"
    direction: str | None = None
    push: bool = False
    easing: str | None = None


# ── Resolved types ────────────────────────────────────────────────


@dataclass(frozen=True)
class ResolvedScene:
    scene: Scene
    start: int
    frames: int

    @property
    def end(self) -> int:
        """Exclusive end frame."""
        return self.start + self.frames


@dataclass(frozen=True)
class ResolvedTransition:
    transition: Transition
    start: int
    outgoing_index: int
    incoming_index: int

    @property
    def end(self) -> int:
        return self.start + self.transition.frames


@dataclass(frozen=True)
class ResolvedTimeline:
    scenes: tuple[ResolvedScene, ...]
    transitions: tuple[ResolvedTransition, ...]
    total_frames: int
    fps: float

    @property
    def starts(self) -> tuple[int, ...]:
        return tuple(rs.start for rs in self.scenes)

    @property
    def scene_lengths(self) -> list[int]:
        return [rs.frames for rs in self.scenes]

    @property
    def transition_frames(self) -> list[int]:
        return [rt.transition.frames for rt in self.transitions]

    @property
    def duration_seconds(self) -> float:
        return self.total_frames / self.fps


@dataclass(frozen=True)
class SceneState:
    """One active scene at a queried frame."""

    scene_id: str
    index: int
    local_frame: int
    renderer: Any = None


@dataclass(frozen=True)
class ActiveState:
    """Everything active at one global frame.

    Outside transitions, scenes holds a single SceneState. Inside a
    transition window it holds (outgoing, incoming), and progress,
    transition and composite are set.
    """

    frame: int
    scenes: tuple[SceneState, ...]
    progress: float | None = None
    transition: Transition | None = None
    composite: CompositeParams | None = None

    @property
    def in_transition(self) -> bool:
        return self.progress is not None


# ── Helpers ───────────────────────────────────────────────────────


def seconds_to_frames(seconds: float, fps: float) -> int:
    """Convert seconds to a whole frame count, rounding halves up."""
    if not isinstance(seconds, (int, float)) or not math.isfinite(seconds):
        raise ConfigurationError(f"seconds must be a finite number, got {seconds!r}")
    if not isinstance(fps, (int, float)) or not fps > 0:
        raise ConfigurationError(f"fps must be > 0, got {fps!r}")
    return math.floor(seconds * fps + 0.5)


def _is_frame_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_inputs(
    scenes: Sequence[Scene],
    transitions: Sequence[Transition],
    total_frames: int,
    fps: float,
) -> None:
    if not scenes:
        raise ConfigurationError("Timeline needs at least one scene")
    if len(transitions) != len(scenes) - 1:
        raise ConfigurationError(
            f"Timeline with {len(scenes)} scenes needs {len(scenes) - 1} "
            f"transitions, got {len(transitions)}"
        )
    if not _is_frame_count(total_frames) or total_frames < 1:
        raise ConfigurationError(
            f"total_frames must be an integer >= 1, got {total_frames!r}"
        )
    if not isinstance(fps, (int, float)) or isinstance(fps, bool) or not fps > 0:
        raise ConfigurationError(f"fps must be > 0, got {fps!r}")

    seen = {}
    for i, scene in enumerate(scenes):
        if not isinstance(scene.id, str) or not scene.id:
            raise ConfigurationError(f"Scene {i}: id must be a non-empty string")
        if scene.id in seen:
            raise ConfigurationError(
                f"Scene {i}: duplicate id '{scene.id}' (also used by scene {seen[scene.id]})"
            )
        seen[scene.id] = i
        if not _is_frame_count(scene.frames) or scene.frames < 1:
            raise ConfigurationError(
                f"Scene {i} ('{scene.id}'): frames must be an integer >= 1, "
                f"got {scene.frames!r}"
            )

    for i, tr in enumerate(transitions):
        if not _is_frame_count(tr.frames) or tr.frames < 0:
            raise ConfigurationError(
                f"Transition {i}: frames must be an integer >= 0, got {tr.frames!r}"
            )
        if tr.kind not in VALID_KINDS:
            raise ConfigurationError(
                f"Transition {i}: unknown kind '{tr.kind}'. Valid: {sorted(VALID_KINDS)}"
            )
        if tr.kind == "slide":
            normalize_direction(tr.direction)
        if tr.easing is not None:
            get_easing(tr.easing)


# ── Build ─────────────────────────────────────────────────────────


def build_timeline(
    scenes: Sequence[Scene],
    transitions: Sequence[Transition],
    total_frames: int,
    fps: float,
) -> ResolvedTimeline:
    """Resolve scene lengths and absolute positions for a timeline.

    Args:
        scenes: Scenes in playback order.
        transitions: One transition between each adjacent pair.
        total_frames: Required length of the whole timeline.
        fps: Frame rate (carried for spring evaluation and reporting).

    Returns:
        ResolvedTimeline whose effective scene lengths minus transition
        frames equal total_frames exactly.

    Raises:
        ConfigurationError: Malformed scenes, transitions, or settings.
        DurationError: The last scene is adjusted to <= 0 frames, or a
            scene is shorter than the transition window(s) touching it.
    """
    _validate_inputs(scenes, transitions, total_frames, fps)

    naive_total = sum(s.frames for s in scenes) - sum(t.frames for t in transitions)
    delta = total_frames - naive_total
    lengths = [s.frames for s in scenes]
    lengths[-1] += delta

    if lengths[-1] <= 0:
        raise DurationError(
            f"Scene {len(scenes) - 1} ('{scenes[-1].id}'): adjusting to a total of "
            f"{total_frames} frames leaves {lengths[-1]} frames "
            f"(requested {scenes[-1].frames}, delta {delta})"
        )

    for i, scene in enumerate(scenes):
        before = transitions[i - 1].frames if i > 0 else 0
        after = transitions[i].frames if i < len(transitions) else 0
        if lengths[i] < before + after:
            raise DurationError(
                f"Scene {i} ('{scene.id}'): {lengths[i]} frames cannot host "
                f"transition overlap of {before} + {after} frames"
            )

    resolved_scenes = []
    resolved_transitions = []
    start = 0
    for i, scene in enumerate(scenes):
        resolved_scenes.append(ResolvedScene(scene=scene, start=start, frames=lengths[i]))
        if i < len(transitions):
            tr = transitions[i]
            start = start + lengths[i] - tr.frames
            resolved_transitions.append(
                ResolvedTransition(
                    transition=tr, start=start,
                    outgoing_index=i, incoming_index=i + 1,
                )
            )

    logger.debug(
        "Resolved %d scenes, %d transitions: naive=%d delta=%+d last=%d frames",
        len(scenes), len(transitions), naive_total, delta, lengths[-1],
    )

    return ResolvedTimeline(
        scenes=tuple(resolved_scenes),
        transitions=tuple(resolved_transitions),
        total_frames=total_frames,
        fps=fps,
    )


# ── Query ─────────────────────────────────────────────────────────


def _scene_state(resolved: ResolvedTimeline, index: int, frame: int) -> SceneState:
    rs = resolved.scenes[index]
    return SceneState(
        scene_id=rs.scene.id,
        index=index,
        local_frame=frame - rs.start,
        renderer=rs.scene.renderer,
    )


def query_frame(resolved: ResolvedTimeline, frame: int) -> ActiveState:
    """Return the scene(s) active at global *frame*.

    Raises:
        ValueError: frame is not an integer.
        FrameRangeError: frame is outside [0, total_frames).
    """
    if not _is_frame_count(frame):
        raise ValueError(f"Frame must be an integer, got {frame!r}")
    if frame < 0 or frame >= resolved.total_frames:
        raise FrameRangeError(
            f"Frame {frame} out of range (timeline has {resolved.total_frames} "
            f"frames, 0-{resolved.total_frames - 1})"
        )

    # Latest scene that has started by this frame.
    index = bisect_right(resolved.starts, frame) - 1

    # Inside the window before scene `index`, the previous scene is
    # still running and both are active.
    if index > 0:
        rt = resolved.transitions[index - 1]
        if rt.start <= frame < rt.end:
            tr = rt.transition
            progress = min(1.0, max(0.0, (frame - rt.start) / tr.frames))
            shaped = get_easing(tr.easing)(progress) if tr.easing else progress
            return ActiveState(
                frame=frame,
                scenes=(
                    _scene_state(resolved, index - 1, frame),
                    _scene_state(resolved, index, frame),
                ),
                progress=progress,
                transition=tr,
                composite=composite(tr.kind, shaped, tr.direction, tr.push),
            )

    return ActiveState(frame=frame, scenes=(_scene_state(resolved, index, frame),))


def describe_timeline(resolved: ResolvedTimeline) -> list[str]:
    """Human-readable rows describing the resolved layout."""
    rows = []
    for i, rs in enumerate(resolved.scenes):
        rows.append(
            f"scene {i:2d}  {rs.scene.id:<20s} frames {rs.start:6d}-{rs.end - 1:<6d} "
            f"({rs.frames} frames)"
        )
        if i < len(resolved.transitions):
            rt = resolved.transitions[i]
            tr = rt.transition
            if tr.frames == 0:
                rows.append("  cut")
                continue
            kind = tr.kind
            if tr.kind == "slide":
                kind += f" {normalize_direction(tr.direction)}"
                if tr.push:
                    kind += " push"
            rows.append(
                f"  {kind:<26s} frames {rt.start:6d}-{rt.end - 1:<6d} "
                f"({tr.frames} frames)"
            )
    return rows
