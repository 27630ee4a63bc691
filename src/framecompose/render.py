"""Frame rendering — turn a global frame number into pixels and gain.

Stateless glue between the timeline and the scene renderers: query the
timeline, draw each active scene at its own local frame, and blend the
pair when a transition is active. Each call is independent, so frames
can be rendered in any order across processes.
"""

import numpy as np

from .envelope import gain_at, gain_curve
from .scenes import render_scene
from .timeline import ActiveState, ResolvedTimeline, query_frame
from .transitions import blend_frames


def render_state(config: dict, state: ActiveState) -> np.ndarray:
    """Render an already-queried ActiveState to an (h, w, 3) uint8 frame."""
    video = config["video"]
    frames = [
        render_scene(s.renderer, s.local_frame, video, config["colors"], config["gradients"])
        for s in state.scenes
    ]
    if not state.in_transition:
        return frames[0]
    outgoing, incoming = frames
    return blend_frames(outgoing, incoming, state.composite, background=video["background"])


def render_frame(config: dict, resolved: ResolvedTimeline, frame: int) -> np.ndarray:
    """Render global *frame* of the timeline."""
    return render_state(config, query_frame(resolved, frame))


def frame_gain(config: dict, frame: int) -> float:
    """Audio gain at global *frame*; 0 when the manifest has no audio."""
    audio = config.get("audio")
    if audio is None:
        return 0.0
    return gain_at(
        frame, config["video"]["duration"],
        audio["fade_in"], audio["fade_out"], audio["gain"],
    )


def audio_gain_curve(config: dict) -> np.ndarray:
    """Per-frame gains for the whole timeline (zeros without audio)."""
    total = config["video"]["duration"]
    audio = config.get("audio")
    if audio is None:
        return np.zeros(total, dtype=np.float64)
    return gain_curve(total, audio["fade_in"], audio["fade_out"], audio["gain"])
