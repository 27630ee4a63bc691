"""Tests for scene renderers."""

import numpy as np
import pytest

from framecompose.params import ListParams, TitleParams, TypewriterParams
from framecompose.scenes import (
    gradient_background,
    item_timing,
    render_scene,
    response_delay,
)


class TestGradientBackground:
    def test_corners(self):
        frame = gradient_background((20, 10), (0, 0, 0), (200, 100, 50))
        assert frame.shape == (10, 20, 3)
        assert frame.dtype == np.uint8
        assert tuple(frame[0, 0]) == (0, 0, 0)
        assert tuple(frame[-1, -1]) == (200, 100, 50)

    def test_solid_when_colors_match(self):
        frame = gradient_background((8, 8), (5, 6, 7), (5, 6, 7))
        assert np.all(frame == [5, 6, 7])


class TestRenderTitle:
    def test_first_frame_is_background(self, video_settings, colors, gradients):
        params = TitleParams(title="Hello")
        frame = render_scene(params, 0, video_settings, colors, gradients)
        bg = gradient_background((160, 90), *gradients["primary"])
        assert np.array_equal(frame, bg)

    def test_title_appears(self, video_settings, colors, gradients):
        params = TitleParams(title="Hello", subtitle="World")
        frame = render_scene(params, 60, video_settings, colors, gradients)
        assert frame.shape == (90, 160, 3)
        bg = gradient_background((160, 90), *gradients["primary"])
        assert not np.array_equal(frame, bg)

    def test_deterministic(self, video_settings, colors, gradients):
        params = TitleParams(title="Hello")
        a = render_scene(params, 12, video_settings, colors, gradients)
        render_scene(params, 40, video_settings, colors, gradients)
        b = render_scene(params, 12, video_settings, colors, gradients)
        assert np.array_equal(a, b)


class TestRenderList:
    def test_item_timing(self):
        params = ListParams(title="T", items=("a", "b", "c"))
        assert item_timing(params, 0) == (30, 45)
        assert item_timing(params, 2) == (54, 69)

    def test_items_change_frame(self, video_settings, colors, gradients):
        params = ListParams(title="T", items=("one", "two"))
        before = render_scene(params, 29, video_settings, colors, gradients)
        after = render_scene(params, 80, video_settings, colors, gradients)
        assert before.shape == after.shape == (90, 160, 3)
        assert not np.array_equal(before, after)

    def test_title_rises_during_entrance(self, video_settings, colors, gradients):
        still = ListParams(title="T", items=("one",), rise_px=0.0)
        rising = ListParams(title="T", items=("one",), rise_px=400.0)
        a = render_scene(still, 5, video_settings, colors, gradients)
        b = render_scene(rising, 5, video_settings, colors, gradients)
        assert not np.array_equal(a, b)

    def test_subtitle_drawn(self, video_settings, colors, gradients):
        plain = ListParams(title="T", items=("one",))
        with_sub = ListParams(title="T", items=("one",), subtitle="More")
        a = render_scene(plain, 100, video_settings, colors, gradients)
        b = render_scene(with_sub, 100, video_settings, colors, gradients)
        assert not np.array_equal(a, b)


class TestRenderTypewriter:
    def test_response_delay(self):
        params = TypewriterParams(text="hello", frames_per_char=2, response_gap=15)
        assert response_delay(params) == 25

    def test_typing_progresses(self, video_settings, colors, gradients):
        params = TypewriterParams(text="typing text", cursor_style="blink")
        # Both frames are in the visible half of the blink cycle.
        a = render_scene(params, 0, video_settings, colors, gradients)
        b = render_scene(params, 20, video_settings, colors, gradients)
        assert not np.array_equal(a, b)

    def test_prompt_card_drawn_immediately(self, video_settings, colors, gradients):
        params = TypewriterParams(text="x")
        frame = render_scene(params, 0, video_settings, colors, gradients)
        bg = gradient_background((160, 90), *gradients["dark"])
        assert not np.array_equal(frame, bg)

    def test_with_response(self, video_settings, colors, gradients):
        params = TypewriterParams(text="hi", response="hello back")
        frame = render_scene(params, 60, video_settings, colors, gradients)
        assert frame.shape == (90, 160, 3)


class TestRenderScene:
    def test_unknown_params(self, video_settings, colors, gradients):
        with pytest.raises(ValueError, match="No renderer"):
            render_scene(object(), 0, video_settings, colors, gradients)
