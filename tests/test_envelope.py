"""Tests for audio gain envelopes."""

import numpy as np
import pytest

from framecompose.envelope import envelope_points, gain_at, gain_curve
from framecompose.errors import ConfigurationError


class TestEnvelopePoints:
    def test_standard_shape(self):
        assert envelope_points(780, 30, 45, 0.35) == [
            (0, 0.0), (30, 0.35), (735, 0.35), (780, 0.0),
        ]

    def test_no_fade_in(self):
        assert envelope_points(100, 0, 10, 1.0) == [(0, 1.0), (90, 1.0), (100, 0.0)]

    def test_no_fade_out(self):
        assert envelope_points(100, 10, 0, 1.0) == [(0, 0.0), (10, 1.0), (100, 1.0)]

    def test_no_fades(self):
        assert envelope_points(100, 0, 0, 0.5) == [(0, 0.5), (100, 0.5)]

    def test_fades_meet(self):
        assert envelope_points(100, 50, 50, 1.0) == [(0, 0.0), (50, 1.0), (100, 0.0)]

    def test_fade_out_fills_timeline(self):
        assert envelope_points(100, 0, 100, 1.0) == [(0, 1.0), (100, 0.0)]

    def test_overlap_rejected(self):
        with pytest.raises(ConfigurationError, match="exceeds total"):
            envelope_points(100, 60, 50, 1.0)

    def test_invalid_values(self):
        with pytest.raises(ConfigurationError, match="total_frames"):
            envelope_points(0, 0, 0, 1.0)
        with pytest.raises(ConfigurationError, match="Fade lengths"):
            envelope_points(100, -1, 0, 1.0)
        with pytest.raises(ConfigurationError, match="target_gain"):
            envelope_points(100, 0, 0, -0.5)


class TestGainAt:
    def test_ramps_and_hold(self):
        assert gain_at(0, 780, 30, 45, 0.35) == 0.0
        assert gain_at(15, 780, 30, 45, 0.35) == pytest.approx(0.175)
        assert gain_at(400, 780, 30, 45, 0.35) == pytest.approx(0.35)
        assert gain_at(757.5, 780, 30, 45, 0.35) == pytest.approx(0.175)
        assert gain_at(780, 780, 30, 45, 0.35) == 0.0

    def test_fade_out_follows_total_length(self):
        # Extending the timeline moves the fade-out with it.
        assert gain_at(735, 900, 30, 45, 0.35) == pytest.approx(0.35)
        assert gain_at(855, 900, 30, 45, 0.35) == pytest.approx(0.35)
        assert gain_at(900, 900, 30, 45, 0.35) == 0.0

    def test_clamped_outside(self):
        assert gain_at(-10, 100, 10, 10, 1.0) == 0.0
        assert gain_at(200, 100, 10, 10, 1.0) == 0.0


class TestGainCurve:
    def test_length_and_dtype(self):
        curve = gain_curve(780, 30, 45, 0.35)
        assert curve.shape == (780,)
        assert curve.dtype == np.float64

    def test_values(self):
        curve = gain_curve(100, 10, 10, 1.0)
        assert curve[0] == 0.0
        assert curve[5] == pytest.approx(0.5)
        assert np.all(curve[10:91] == 1.0)
        assert curve[99] == pytest.approx(0.1)
        assert np.all((curve >= 0.0) & (curve <= 1.0))
