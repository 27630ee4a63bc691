"""Transition presentations — how two scenes are drawn inside a window.

A presentation turns a progress value in [0, 1] into blend parameters
for the outgoing (earlier) and incoming (later) scene:

  - fade:  outgoing alpha 1 -> 0, incoming alpha 0 -> 1, no movement.
  - slide: incoming scene moves in from one full frame away on the
    direction's axis to rest. With push, the outgoing scene moves out
    the opposite side over the same progress range; otherwise it stays.

Offsets are (dx, dy) in units of the frame width / height. Draw order
is fixed: outgoing first, incoming on top.
"""

from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError


VALID_KINDS = {"fade", "slide"}

# Direction → unit vector pointing from rest to where the incoming
# scene starts (from-right starts one frame width to the right).
SLIDE_VECTORS = {
    "from-left": (-1.0, 0.0),
    "from-right": (1.0, 0.0),
    "from-top": (0.0, -1.0),
    "from-bottom": (0.0, 1.0),
}

DIRECTION_ALIASES = {
    "left": "from-left",
    "right": "from-right",
    "top": "from-top",
    "bottom": "from-bottom",
}

VALID_DIRECTIONS = set(SLIDE_VECTORS) | set(DIRECTION_ALIASES)


@dataclass(frozen=True)
class CompositeParams:
    """Blend parameters for the two scenes sharing a transition window."""

    outgoing_alpha: float
    outgoing_offset: tuple[float, float]
    incoming_alpha: float
    incoming_offset: tuple[float, float]

    def to_dict(self) -> dict:
        return {
            "outgoing_alpha": self.outgoing_alpha,
            "outgoing_offset": list(self.outgoing_offset),
            "incoming_alpha": self.incoming_alpha,
            "incoming_offset": list(self.incoming_offset),
        }


def normalize_direction(direction: str | None) -> str:
    """Map a slide direction (or its bare alias) to the from-* form."""
    if direction is None:
        return "from-right"
    if direction in DIRECTION_ALIASES:
        return DIRECTION_ALIASES[direction]
    if direction not in SLIDE_VECTORS:
        raise ConfigurationError(
            f"Invalid slide direction '{direction}'. "
            f"Valid: {sorted(VALID_DIRECTIONS)}"
        )
    return direction


def composite(
    kind: str,
    progress: float,
    direction: str | None = None,
    push: bool = False,
) -> CompositeParams:
    """Compute blend parameters for *kind* at *progress*.

    Progress outside [0, 1] is clamped. A slide without a direction
    comes in from the right.

    Raises:
        ConfigurationError: Unknown kind or direction.
    """
    if kind not in VALID_KINDS:
        raise ConfigurationError(
            f"Unknown transition kind '{kind}'. Valid: {sorted(VALID_KINDS)}"
        )
    p = min(1.0, max(0.0, float(progress)))

    if kind == "fade":
        return CompositeParams(
            outgoing_alpha=1.0 - p,
            outgoing_offset=(0.0, 0.0),
            incoming_alpha=p,
            incoming_offset=(0.0, 0.0),
        )

    vx, vy = SLIDE_VECTORS[normalize_direction(direction)]
    remaining = 1.0 - p
    incoming_offset = (vx * remaining, vy * remaining)
    if push:
        outgoing_offset = (-vx * p, -vy * p)
    else:
        outgoing_offset = (0.0, 0.0)
    return CompositeParams(
        outgoing_alpha=1.0,
        outgoing_offset=outgoing_offset,
        incoming_alpha=1.0,
        incoming_offset=incoming_offset,
    )


# ── Frame blending ────────────────────────────────────────────────


def _shift(frame: np.ndarray, offset: tuple[float, float],
           background: tuple[int, int, int]) -> np.ndarray:
    """Translate a frame by a fractional-frame offset, filling with background."""
    h, w = frame.shape[:2]
    dx = int(round(offset[0] * w))
    dy = int(round(offset[1] * h))
    if dx == 0 and dy == 0:
        return frame
    out = np.empty_like(frame)
    out[:, :] = background
    if abs(dx) >= w or abs(dy) >= h:
        return out

    src_x0, dst_x0 = max(0, -dx), max(0, dx)
    src_y0, dst_y0 = max(0, -dy), max(0, dy)
    span_w = w - abs(dx)
    span_h = h - abs(dy)
    out[dst_y0:dst_y0 + span_h, dst_x0:dst_x0 + span_w] = (
        frame[src_y0:src_y0 + span_h, src_x0:src_x0 + span_w]
    )
    return out


def _coverage(shape: tuple[int, int], offset: tuple[float, float]) -> np.ndarray:
    """Mask (h, w, 1) of pixels covered by a frame shifted by *offset*."""
    h, w = shape
    mask = np.zeros((h, w, 1), dtype=np.float32)
    dx = int(round(offset[0] * w))
    dy = int(round(offset[1] * h))
    if abs(dx) >= w or abs(dy) >= h:
        return mask
    x0, y0 = max(0, dx), max(0, dy)
    mask[y0:y0 + h - abs(dy), x0:x0 + w - abs(dx)] = 1.0
    return mask


def blend_frames(
    outgoing: np.ndarray,
    incoming: np.ndarray,
    params: CompositeParams,
    background: tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Composite two (h, w, 3) uint8 frames with the given parameters.

    Layers are drawn over a solid background: the outgoing frame first,
    the incoming frame on top. Each layer is alpha-blended only where it
    covers the canvas after its offset.

    Returns:
        New (h, w, 3) uint8 frame.
    """
    if outgoing.shape != incoming.shape:
        raise ValueError(
            f"Frame shapes differ: {outgoing.shape} vs {incoming.shape}"
        )
    h, w = outgoing.shape[:2]
    canvas = np.empty((h, w, 3), dtype=np.float32)
    canvas[:, :] = background

    for frame, alpha, offset in (
        (outgoing, params.outgoing_alpha, params.outgoing_offset),
        (incoming, params.incoming_alpha, params.incoming_offset),
    ):
        if alpha <= 0:
            continue
        layer = _shift(frame, offset, background).astype(np.float32)
        a = _coverage((h, w), offset) * np.float32(alpha)
        canvas = canvas * (1 - a) + layer * a

    return np.clip(np.rint(canvas), 0, 255).astype(np.uint8)
