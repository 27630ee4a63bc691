"""Tests for timeline resolution and per-frame queries."""

import logging

import pytest

from framecompose.errors import ConfigurationError, DurationError, FrameRangeError
from framecompose.timeline import (
    Scene,
    Transition,
    build_timeline,
    describe_timeline,
    query_frame,
    seconds_to_frames,
)


def _five_scene_timeline(total=780, last=150, transition=Transition(15)):
    scenes = [
        Scene("welcome", 120),
        Scene("setup", 150),
        Scene("typewriter", 150),
        Scene("tips", 180),
        Scene("cta", last),
    ]
    return build_timeline(scenes, [transition] * 4, total, 30)


class TestSecondsToFrames:
    def test_exact(self):
        assert seconds_to_frames(4, 30) == 120

    def test_rounds_half_up(self):
        assert seconds_to_frames(0.5, 30) == 15
        assert seconds_to_frames(0.25, 30) == 8
        assert seconds_to_frames(0.1, 25) == 3

    def test_invalid_fps(self):
        with pytest.raises(ConfigurationError, match="fps"):
            seconds_to_frames(1, 0)


class TestBuildTimeline:
    def test_last_scene_absorbs_difference(self):
        resolved = _five_scene_timeline()
        assert resolved.scene_lengths == [120, 150, 150, 180, 240]
        assert resolved.starts == (0, 105, 240, 375, 540)
        assert resolved.total_frames == 780

    def test_total_matches_required_length(self):
        resolved = _five_scene_timeline()
        assert sum(resolved.scene_lengths) - sum(resolved.transition_frames) == 780
        assert resolved.scenes[-1].end == 780

    def test_last_scene_shrinks(self):
        resolved = _five_scene_timeline(total=600)
        assert resolved.scene_lengths[-1] == 60
        assert resolved.scenes[-1].end == 600

    def test_transition_windows(self):
        resolved = _five_scene_timeline()
        assert [(rt.start, rt.end) for rt in resolved.transitions] == [
            (105, 120), (240, 255), (375, 390), (540, 555),
        ]
        assert resolved.transitions[0].outgoing_index == 0
        assert resolved.transitions[0].incoming_index == 1

    def test_duration_seconds(self):
        assert _five_scene_timeline().duration_seconds == 26.0

    def test_single_scene(self):
        resolved = build_timeline([Scene("only", 10)], [], 90, 30)
        assert resolved.scene_lengths == [90]
        assert resolved.transitions == ()

    def test_last_scene_eliminated(self):
        with pytest.raises(DurationError, match="leaves 0 frames"):
            _five_scene_timeline(total=540)

    def test_scene_too_short_for_overlap(self):
        with pytest.raises(DurationError, match="cannot host"):
            build_timeline([Scene("a", 10), Scene("b", 10)], [Transition(15)], 5, 30)

    def test_middle_scene_must_fit_both_windows(self):
        scenes = [Scene("a", 60), Scene("b", 20), Scene("c", 60)]
        with pytest.raises(DurationError, match=r"Scene 1 \('b'\)"):
            build_timeline(scenes, [Transition(15), Transition(15)], 110, 30)

    def test_scene_exactly_fits_windows(self):
        scenes = [Scene("a", 60), Scene("b", 30), Scene("c", 60)]
        resolved = build_timeline(scenes, [Transition(15), Transition(15)], 120, 30)
        assert resolved.starts == (0, 45, 60)

    def test_logs_resolution(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="framecompose.timeline"):
            _five_scene_timeline()
        assert "delta=+90" in caplog.text


class TestBuildValidation:
    def test_no_scenes(self):
        with pytest.raises(ConfigurationError, match="at least one scene"):
            build_timeline([], [], 10, 30)

    def test_transition_count(self):
        with pytest.raises(ConfigurationError, match="needs 1 transitions"):
            build_timeline([Scene("a", 10), Scene("b", 10)], [], 20, 30)

    def test_duplicate_ids(self):
        with pytest.raises(ConfigurationError, match="duplicate id 'a'"):
            build_timeline([Scene("a", 10), Scene("a", 10)], [Transition(0)], 20, 30)

    def test_zero_length_scene(self):
        with pytest.raises(ConfigurationError, match="frames must be an integer >= 1"):
            build_timeline([Scene("a", 0)], [], 20, 30)

    def test_negative_transition(self):
        with pytest.raises(ConfigurationError, match="Transition 0"):
            build_timeline([Scene("a", 10), Scene("b", 10)], [Transition(-1)], 20, 30)

    def test_unknown_kind(self):
        with pytest.raises(ConfigurationError, match="unknown kind 'wipe'"):
            build_timeline(
                [Scene("a", 10), Scene("b", 10)], [Transition(5, kind="wipe")], 15, 30,
            )

    def test_bad_slide_direction(self):
        with pytest.raises(ConfigurationError, match="Invalid slide direction"):
            build_timeline(
                [Scene("a", 10), Scene("b", 10)],
                [Transition(5, kind="slide", direction="up")], 15, 30,
            )

    def test_bad_easing(self):
        with pytest.raises(ConfigurationError, match="Unknown easing"):
            build_timeline(
                [Scene("a", 10), Scene("b", 10)], [Transition(5, easing="wobble")], 15, 30,
            )

    def test_invalid_total(self):
        with pytest.raises(ConfigurationError, match="total_frames"):
            build_timeline([Scene("a", 10)], [], 0, 30)

    def test_invalid_fps(self):
        with pytest.raises(ConfigurationError, match="fps"):
            build_timeline([Scene("a", 10)], [], 10, 0)


class TestQueryFrame:
    def test_inside_transition(self):
        state = query_frame(_five_scene_timeline(), 119)
        assert state.in_transition
        assert [s.scene_id for s in state.scenes] == ["welcome", "setup"]
        assert state.progress == pytest.approx(14 / 15)
        assert state.scenes[0].local_frame == 119
        assert state.scenes[1].local_frame == 14

    def test_transition_start(self):
        state = query_frame(_five_scene_timeline(), 105)
        assert state.progress == 0.0
        assert state.scenes[1].local_frame == 0
        assert state.composite.incoming_alpha == 0.0

    def test_just_before_transition(self):
        state = query_frame(_five_scene_timeline(), 104)
        assert not state.in_transition
        assert state.scenes[0].scene_id == "welcome"
        assert state.scenes[0].local_frame == 104

    def test_just_after_transition(self):
        state = query_frame(_five_scene_timeline(), 120)
        assert not state.in_transition
        assert state.scenes[0].scene_id == "setup"
        assert state.scenes[0].local_frame == 15

    def test_boundaries(self):
        resolved = _five_scene_timeline()
        first = query_frame(resolved, 0)
        assert first.scenes[0].scene_id == "welcome"
        assert first.scenes[0].local_frame == 0
        last = query_frame(resolved, 779)
        assert last.scenes[0].scene_id == "cta"
        assert last.scenes[0].local_frame == 239

    def test_every_frame_has_one_or_two_scenes(self):
        resolved = _five_scene_timeline()
        for frame in range(resolved.total_frames):
            state = query_frame(resolved, frame)
            assert len(state.scenes) == (2 if state.in_transition else 1)
            for s in state.scenes:
                assert 0 <= s.local_frame < resolved.scenes[s.index].frames

    def test_out_of_range(self):
        resolved = _five_scene_timeline()
        with pytest.raises(FrameRangeError, match="out of range"):
            query_frame(resolved, 780)
        with pytest.raises(FrameRangeError, match="out of range"):
            query_frame(resolved, -1)

    def test_non_integer_frame(self):
        with pytest.raises(ValueError, match="integer"):
            query_frame(_five_scene_timeline(), 10.5)

    def test_hard_cut(self):
        resolved = build_timeline(
            [Scene("a", 10), Scene("b", 10)], [Transition(0)], 20, 30,
        )
        assert query_frame(resolved, 9).scenes[0].scene_id == "a"
        state = query_frame(resolved, 10)
        assert not state.in_transition
        assert state.scenes[0].scene_id == "b"
        assert state.scenes[0].local_frame == 0

    def test_easing_shapes_composite_only(self):
        resolved = build_timeline(
            [Scene("a", 20), Scene("b", 20)],
            [Transition(10, easing="quad")], 30, 30,
        )
        state = query_frame(resolved, 15)
        assert state.progress == 0.5
        assert state.composite.incoming_alpha == pytest.approx(0.25)

    def test_slide_composite(self):
        resolved = build_timeline(
            [Scene("a", 20), Scene("b", 20)],
            [Transition(10, kind="slide", direction="from-left", push=True)], 30, 30,
        )
        state = query_frame(resolved, 15)
        assert state.composite.incoming_offset == (-0.5, 0.0)
        assert state.composite.outgoing_offset == (0.5, 0.0)

    def test_renderer_passed_through(self):
        marker = object()
        resolved = build_timeline([Scene("a", 10, renderer=marker)], [], 10, 30)
        assert query_frame(resolved, 3).scenes[0].renderer is marker

    def test_order_independent(self):
        resolved = _five_scene_timeline()
        forward = [query_frame(resolved, f) for f in range(100, 130)]
        backward = [query_frame(resolved, f) for f in reversed(range(100, 130))]
        assert forward == list(reversed(backward))


class TestDescribeTimeline:
    def test_rows(self):
        rows = describe_timeline(_five_scene_timeline())
        assert len(rows) == 9
        assert "welcome" in rows[0]
        assert "fade" in rows[1]
        assert "105-119" in rows[1]

    def test_cut_and_slide(self):
        resolved = build_timeline(
            [Scene("a", 10), Scene("b", 20), Scene("c", 20)],
            [Transition(0), Transition(5, kind="slide", push=True)], 45, 30,
        )
        rows = describe_timeline(resolved)
        assert rows[1] == "  cut"
        assert "slide from-right push" in rows[3]
