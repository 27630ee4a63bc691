"""Tests for keyframe interpolation."""

import math

import pytest

from framecompose.easing import quad
from framecompose.errors import ConfigurationError
from framecompose.keyframes import Keyframes, interpolate


class TestInterpolateInsideDomain:
    def test_midpoint(self):
        assert interpolate(15, [0, 30], [0, 1], "clamp", "clamp") == 0.5

    def test_endpoints(self):
        assert interpolate(0, [0, 30], [0, 1]) == 0.0
        assert interpolate(30, [0, 30], [0, 1]) == 1.0

    def test_multi_segment(self):
        inputs, outputs = [0, 10, 20], [0, 100, 0]
        assert interpolate(5, inputs, outputs) == 50.0
        assert interpolate(10, inputs, outputs) == 100.0
        assert interpolate(15, inputs, outputs) == 50.0
        assert interpolate(20, inputs, outputs) == 0.0

    def test_fractional_frame(self):
        assert interpolate(2.5, [0, 10], [0, 100]) == pytest.approx(25.0)

    def test_easing_applied_per_segment(self):
        assert interpolate(15, [0, 30], [0, 100], easing=quad) == pytest.approx(25.0)
        # Second segment restarts its own progress.
        assert interpolate(15, [0, 10, 20], [0, 10, 20], easing=quad) == pytest.approx(12.5)

    def test_decreasing_outputs(self):
        assert interpolate(10, [0, 20], [50, 0]) == 25.0


class TestExtrapolation:
    def test_clamp(self):
        assert interpolate(-5, [0, 30], [0, 1], "clamp", "clamp") == 0.0
        assert interpolate(40, [0, 30], [0, 1], "clamp", "clamp") == 1.0

    def test_extend_uses_boundary_slope(self):
        assert interpolate(-10, [0, 30], [0, 1], "extend", "extend") == pytest.approx(-1 / 3)
        assert interpolate(45, [0, 30], [0, 1], "extend", "extend") == pytest.approx(1.5)

    def test_extend_uses_nearest_segment(self):
        inputs, outputs = [0, 10, 20], [0, 10, 0]
        assert interpolate(-5, inputs, outputs, "extend", "extend") == pytest.approx(-5.0)
        assert interpolate(25, inputs, outputs, "extend", "extend") == pytest.approx(-5.0)

    def test_identity(self):
        assert interpolate(50, [0, 30], [0, 1], None, "identity") == 50.0

    def test_policies_are_per_side(self):
        assert interpolate(-10, [0, 10], [0, 1], "extend", "clamp") == pytest.approx(-1.0)
        assert interpolate(20, [0, 10], [0, 1], "extend", "clamp") == 1.0

    def test_missing_policy_raises(self):
        with pytest.raises(ConfigurationError, match="outside the keyframe domain"):
            interpolate(40, [0, 30], [0, 1], "clamp", None)
        with pytest.raises(ConfigurationError, match="left"):
            interpolate(-1, [0, 30], [0, 1])


class TestValidation:
    def test_non_monotonic_inputs(self):
        with pytest.raises(ConfigurationError, match="strictly increasing"):
            interpolate(5, [0, 10, 10], [0, 1, 2])

    def test_decreasing_inputs(self):
        with pytest.raises(ConfigurationError, match="strictly increasing"):
            interpolate(5, [10, 0], [0, 1])

    def test_mismatched_lengths(self):
        with pytest.raises(ConfigurationError, match="equal length"):
            interpolate(5, [0, 10], [0, 1, 2])

    def test_too_few_points(self):
        with pytest.raises(ConfigurationError, match="at least 2"):
            interpolate(0, [0], [1])

    def test_invalid_policy_name(self):
        with pytest.raises(ConfigurationError, match="extrapolation"):
            interpolate(5, [0, 10], [0, 1], "wrap", "clamp")

    def test_non_finite_frame(self):
        with pytest.raises(ConfigurationError, match="non-finite"):
            interpolate(math.nan, [0, 10], [0, 1], "clamp", "clamp")

    def test_non_finite_keyframe(self):
        with pytest.raises(ConfigurationError, match="non-finite"):
            interpolate(5, [0, math.inf], [0, 1])


class TestKeyframes:
    def test_clamped_value_at(self):
        kf = Keyframes.clamped([0, 30], [0, 1])
        assert kf.value_at(-10) == 0.0
        assert kf.value_at(15) == 0.5
        assert kf.value_at(45) == 1.0

    def test_validates_on_construction(self):
        with pytest.raises(ConfigurationError):
            Keyframes([0, 0], [0, 1])

    def test_inputs_stored_as_tuples(self):
        kf = Keyframes([0, 10], [1, 2], "clamp", "clamp")
        assert kf.inputs == (0, 10)
        assert kf.outputs == (1, 2)
