"""Scene renderers — draw one scene at one local frame.

A renderer receives the scene's parameter struct and a scene-relative
frame number, and returns a full RGB frame. All motion comes from the
engine primitives (keyframes, springs, text reveal) evaluated at that
local frame, so a frame can be drawn on its own, in any order.

Layout (title):
  ┌─────────────────────────────────────┐
  │                                     │
  │          Title text                 │  ← springs up + fades in
  │          Subtitle                   │  ← fades in after a delay
  │                                     │
  └─────────────────────────────────────┘

Layout (list):
  ┌─────────────────────────────────────┐
  │            Title text               │  ← springs up + fades in
  │            Subtitle                 │  ← optional, delayed fade
  │        ✓ item one                   │  ← items slide in, staggered
  │        ✓ item two                   │
  └─────────────────────────────────────┘

Layout (typewriter):
  ┌─────────────────────────────────────┐
  │  ┌───────────────────────────────┐  │
  │  │ You: typed text so fa|        │  │  ← prompt card
  │  └───────────────────────────────┘  │
  │  ┌───────────────────────────────┐  │
  │  │ AI: response                  │  │  ← springs in after typing
  │  └───────────────────────────────┘  │
  └─────────────────────────────────────┘

All pixel constants are authored at 1080p and scaled to the output height.
"""

import numpy as np
from PIL import Image, ImageDraw

from .common import REF_HEIGHT, load_font, measure_text, scale_px
from .easing import ease_out, quad
from .keyframes import EXTRAPOLATE_CLAMP, EXTRAPOLATE_EXTEND, interpolate
from .params import ListParams, TitleParams, TypewriterParams
from .spring import spring, spring_value
from .text_reveal import cursor_opacity, cursor_visible, reveal, reveal_end_frame


# ── 1080p reference sizes ─────────────────────────────────────────

_REF_TITLE_FONT = 72
_REF_SUBTITLE_FONT = 36
_REF_ITEM_FONT = 32
_REF_TYPE_FONT = 28
_REF_TITLE_GAP = 24
_REF_LIST_GAP = 60
_REF_ITEM_SPACING = 20
_REF_CARD_PADDING = 40
_REF_CARD_RADIUS = 24
_REF_CARD_GAP = 32
_REF_CARD_MAX_W = 1000

_ITEM_MARK = "✓"

_ease_out_quad = ease_out(quad)


def _clamped(frame, inputs, outputs, easing=None) -> float:
    return interpolate(frame, inputs, outputs, EXTRAPOLATE_CLAMP, EXTRAPOLATE_CLAMP, easing)


# ── Background ────────────────────────────────────────────────────


def gradient_background(
    resolution: tuple[int, int],
    start: tuple[int, int, int],
    end: tuple[int, int, int],
) -> np.ndarray:
    """Diagonal (top-left to bottom-right) two-color gradient frame."""
    w, h = resolution
    xs = np.linspace(0.0, 1.0, w, dtype=np.float32)
    ys = np.linspace(0.0, 1.0, h, dtype=np.float32)
    t = (xs[np.newaxis, :] + ys[:, np.newaxis]) / 2
    a = np.array(start, dtype=np.float32)
    b = np.array(end, dtype=np.float32)
    frame = a + (b - a) * t[:, :, np.newaxis]
    return np.rint(frame).astype(np.uint8)


# ── Drawing helpers ───────────────────────────────────────────────


def _alpha(opacity: float) -> int:
    return int(round(255 * min(1.0, max(0.0, opacity))))


def _draw_text(
    canvas: Image.Image,
    text: str,
    xy: tuple[float, float],
    font_size: int,
    color: tuple[int, int, int],
    opacity: float,
) -> None:
    """Alpha-composite text onto an RGBA canvas at top-left *xy*."""
    if opacity <= 0 or not text or font_size < 1:
        return
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(layer).text(
        (round(xy[0]), round(xy[1])), text,
        fill=(*color, _alpha(opacity)), font=load_font(font_size),
    )
    canvas.alpha_composite(layer)


def _centered_x(text: str, font_size: int, width: int) -> float:
    tw, _ = measure_text(text, load_font(font_size))
    return (width - tw) / 2


def _draw_card(
    canvas: Image.Image,
    box: tuple[float, float, float, float],
    color: tuple[int, int, int],
    opacity: float,
    radius: int,
) -> None:
    if opacity <= 0 or box[2] <= box[0] or box[3] <= box[1]:
        return
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(layer).rounded_rectangle(
        [(round(box[0]), round(box[1])), (round(box[2]), round(box[3]))],
        radius=radius, fill=(*color, _alpha(opacity)),
    )
    canvas.alpha_composite(layer)


def _base_canvas(params, video_settings: dict, gradients: dict) -> Image.Image:
    start, end = gradients[params.gradient]
    bg = gradient_background(video_settings["resolution"], start, end)
    return Image.fromarray(bg).convert("RGBA")


def _finish(canvas: Image.Image) -> np.ndarray:
    return np.array(canvas.convert("RGB"))


# ── Title ─────────────────────────────────────────────────────────


def render_title(
    params: TitleParams,
    frame: int,
    video_settings: dict,
    colors: dict[str, tuple[int, int, int]],
    gradients: dict,
) -> np.ndarray:
    """Title that rises into place on a spring, with a delayed subtitle."""
    w, h = video_settings["resolution"]
    fps = video_settings["fps"]
    canvas = _base_canvas(params, video_settings, gradients)

    title_spring = spring_value(frame, fps, params.spring)
    title_y_offset = interpolate(
        title_spring, [0, 1], [params.rise_px * h / REF_HEIGHT, 0],
        EXTRAPOLATE_EXTEND, EXTRAPOLATE_EXTEND,
    )
    title_opacity = _clamped(frame, [0, params.fade_frames], [0, 1])
    subtitle_opacity = _clamped(
        frame,
        [params.subtitle_delay, params.subtitle_delay + params.fade_frames],
        [0, 1],
    )

    title_size = scale_px(_REF_TITLE_FONT, h)
    subtitle_size = scale_px(_REF_SUBTITLE_FONT, h)
    gap = scale_px(_REF_TITLE_GAP, h)

    _, title_h = measure_text(params.title, load_font(title_size))
    sub_h = 0
    if params.subtitle:
        _, sub_h = measure_text(params.subtitle, load_font(subtitle_size))
    block_h = title_h + (gap + sub_h if params.subtitle else 0)
    top = (h - block_h) / 2

    _draw_text(
        canvas, params.title,
        (_centered_x(params.title, title_size, w), top + title_y_offset),
        title_size, colors["text"], title_opacity,
    )
    if params.subtitle:
        _draw_text(
            canvas, params.subtitle,
            (_centered_x(params.subtitle, subtitle_size, w), top + title_h + gap),
            subtitle_size, colors["text_secondary"], subtitle_opacity,
        )
    return _finish(canvas)


# ── List ──────────────────────────────────────────────────────────


def item_timing(params: ListParams, index: int) -> tuple[int, int]:
    """(start, end) local frames of list item *index*'s entrance."""
    start = params.item_delay + index * params.item_stagger
    return start, start + params.item_fade


def render_list(
    params: ListParams,
    frame: int,
    video_settings: dict,
    colors: dict[str, tuple[int, int, int]],
    gradients: dict,
) -> np.ndarray:
    """Rising title and optional subtitle, then items that slide in one by one."""
    w, h = video_settings["resolution"]
    fps = video_settings["fps"]
    canvas = _base_canvas(params, video_settings, gradients)

    title_size = scale_px(_REF_TITLE_FONT, h)
    subtitle_size = scale_px(_REF_SUBTITLE_FONT, h)
    title_gap = scale_px(_REF_TITLE_GAP, h)
    item_size = scale_px(_REF_ITEM_FONT, h)
    list_gap = scale_px(_REF_LIST_GAP, h)
    spacing = scale_px(_REF_ITEM_SPACING, h)

    item_font = load_font(item_size)
    lines = [f"{_ITEM_MARK}  {item}" for item in params.items]
    line_sizes = [measure_text(line, item_font) for line in lines]
    _, title_h = measure_text(params.title, load_font(title_size))
    sub_h = 0
    if params.subtitle:
        _, sub_h = measure_text(params.subtitle, load_font(subtitle_size))
    header_h = title_h + (title_gap + sub_h if params.subtitle else 0)
    list_h = sum(lh for _, lh in line_sizes) + spacing * (len(lines) - 1)
    top = (h - (header_h + list_gap + list_h)) / 2

    # Same entrance as a title scene: rise on the spring, fade in.
    title_spring = spring_value(frame, fps, params.spring)
    title_y_offset = interpolate(
        title_spring, [0, 1], [params.rise_px * h / REF_HEIGHT, 0],
        EXTRAPOLATE_EXTEND, EXTRAPOLATE_EXTEND,
    )
    title_opacity = _clamped(frame, [0, params.fade_frames], [0, 1])
    _draw_text(
        canvas, params.title,
        (_centered_x(params.title, title_size, w), top + title_y_offset),
        title_size, colors["text"], title_opacity,
    )
    if params.subtitle:
        subtitle_opacity = _clamped(
            frame,
            [params.subtitle_delay, params.subtitle_delay + params.fade_frames],
            [0, 1],
        )
        _draw_text(
            canvas, params.subtitle,
            (_centered_x(params.subtitle, subtitle_size, w), top + title_h + title_gap),
            subtitle_size, colors["text_secondary"], subtitle_opacity,
        )

    list_w = max(lw for lw, _ in line_sizes)
    x0 = (w - list_w) / 2
    y = top + header_h + list_gap
    shift = params.item_shift_px * h / REF_HEIGHT
    for i, line in enumerate(lines):
        start, end = item_timing(params, i)
        opacity = _clamped(frame, [start, end], [0, 1])
        dx = _clamped(frame, [start, end], [shift, 0], easing=_ease_out_quad)
        _draw_text(canvas, line, (x0 + dx, y), item_size, colors["text"], opacity)
        y += line_sizes[i][1] + spacing
    return _finish(canvas)


# ── Typewriter ────────────────────────────────────────────────────


def response_delay(params: TypewriterParams) -> int:
    """Local frame at which the response card starts to appear."""
    return reveal_end_frame(params.text, params.frames_per_char) + params.response_gap


def render_typewriter(
    params: TypewriterParams,
    frame: int,
    video_settings: dict,
    colors: dict[str, tuple[int, int, int]],
    gradients: dict,
) -> np.ndarray:
    """Prompt typed out with a cursor, then a response card springing in."""
    w, h = video_settings["resolution"]
    fps = video_settings["fps"]
    canvas = _base_canvas(params, video_settings, gradients)

    font_size = scale_px(_REF_TYPE_FONT, h)
    pad = scale_px(_REF_CARD_PADDING, h)
    radius = scale_px(_REF_CARD_RADIUS, h)
    card_gap = scale_px(_REF_CARD_GAP, h)
    card_w = min(w - 2 * pad, scale_px(_REF_CARD_MAX_W, h))
    font = load_font(font_size)
    _, line_h = measure_text("Ag", font)
    card_h = line_h + 2 * pad

    has_response = params.response is not None
    block_h = card_h + (card_gap + card_h if has_response else 0)
    left = (w - card_w) / 2
    top = (h - block_h) / 2

    # Prompt card.
    _draw_card(canvas, (left, top, left + card_w, top + card_h),
               colors["card"], 0.6, radius)
    label = f"{params.prompt_label} "
    label_w, _ = measure_text(label, font)
    _draw_text(canvas, label, (left + pad, top + pad), font_size,
               colors["highlight"], 1.0)
    typed = reveal(params.text, frame, params.frames_per_char)
    typed_w, _ = measure_text(typed, font)
    _draw_text(canvas, typed, (left + pad + label_w, top + pad), font_size,
               colors["text"], 1.0)

    if params.cursor_style == "blink":
        cursor = 1.0 if cursor_visible(frame, params.cursor_cycle) else 0.0
    else:
        cursor = cursor_opacity(frame, params.cursor_cycle)
    _draw_text(canvas, "|", (left + pad + label_w + typed_w, top + pad),
               font_size, colors["highlight"], cursor)

    # Response card: fades in and scales up from its centre.
    if has_response:
        delay = response_delay(params)
        opacity = _clamped(frame, [delay, delay + params.response_fade], [0, 1])
        scale = spring(frame, fps, params.spring, delay=delay)
        cy = top + card_h + card_gap + card_h / 2
        cx = w / 2
        half_w, half_h = card_w * scale / 2, card_h * scale / 2
        _draw_card(canvas, (cx - half_w, cy - half_h, cx + half_w, cy + half_h),
                   colors["card"], opacity, max(1, round(radius * scale)))
        text = f"{params.response_label} {params.response}"
        size = round(font_size * scale)
        if size >= 1:
            tw, th = measure_text(text, load_font(size))
            _draw_text(canvas, text, (cx - tw / 2, cy - th / 2), size,
                       colors["text"], opacity)
    return _finish(canvas)


# ── Dispatch ──────────────────────────────────────────────────────
# Maps scene kind → renderer. All renderers share the signature:
# (params, local_frame, video_settings, colors, gradients) -> ndarray.

SCENE_RENDERERS = {
    "title": render_title,
    "list": render_list,
    "typewriter": render_typewriter,
}


def render_scene(
    params,
    frame: int,
    video_settings: dict,
    colors: dict[str, tuple[int, int, int]],
    gradients: dict,
) -> np.ndarray:
    """Render a scene's parameter struct at local *frame*.

    Raises:
        ValueError: params is not a known scene parameter struct.
    """
    kind = getattr(params, "kind", None)
    if kind not in SCENE_RENDERERS:
        raise ValueError(f"No renderer for scene parameters {params!r}")
    return SCENE_RENDERERS[kind](params, frame, video_settings, colors, gradients)
