"""
Unit Tests for the notch (biquad) and fixed-tap (FIR) filters

Both filters are checked against scipy.signal.lfilter, which evaluates the
same difference equations.

Run:
    pytest tests/test_filters.py -v
"""

import numpy as np
import pytest
from scipy.signal import lfilter

from sigchain.dsp_core import (
    DEFAULT_TAPS,
    Biquad,
    BiquadCoefficients,
    FIRFilter,
    NotchFilter,
    apply_fir,
    apply_notch,
    generate_sine,
    notch_coefficients,
)
from sigchain.exceptions import InvalidParameterError, NumericDegeneracyError


def _rms(x: np.ndarray) -> float:
    return float(np.sqrt(np.mean(x ** 2)))


class TestNotch:
    """Test suite for the biquad notch filter."""

    SR = 8000
    F0 = 1000.0
    BW = 50.0

    def test_coefficients(self):
        c = notch_coefficients(self.F0, self.SR, self.BW)
        omega = 2 * np.pi * self.F0 / self.SR
        alpha = np.sin(np.pi * self.BW / self.SR)

        assert c.b0 == 1.0 and c.b2 == 1.0
        assert c.b1 == pytest.approx(-2 * np.cos(omega))
        assert c.a1 == pytest.approx(-2 * np.cos(omega))
        assert c.a0 == pytest.approx(1 + alpha)
        assert c.a2 == pytest.approx(1 - alpha)

    def test_matches_lfilter(self):
        rng = np.random.default_rng(0)
        x = rng.standard_normal(4096)
        c = notch_coefficients(self.F0, self.SR, self.BW)

        y_ours = apply_notch(x, self.F0, self.SR, self.BW)
        y_scipy = lfilter([c.b0, c.b1, c.b2], [c.a0, c.a1, c.a2], x)

        error = np.abs(y_ours - y_scipy)
        print(f"\n[Notch vs lfilter] Max error: {error.max():.2e}")
        assert error.max() < 1e-10

    def test_attenuates_target(self):
        x = generate_sine(self.F0, self.SR, 1.0)
        y = apply_notch(x, self.F0, self.SR, self.BW)

        # Skip the initial transient
        ratio = _rms(y[self.SR // 2:]) / _rms(x[self.SR // 2:])
        print(f"\n[Notch] steady-state gain at target: {ratio:.2e}")
        assert len(y) == len(x)
        assert ratio < 0.5

    def test_passes_other_frequencies(self):
        x = generate_sine(200.0, self.SR, 1.0)
        y = apply_notch(x, self.F0, self.SR, self.BW)

        ratio = _rms(y[self.SR // 2:]) / _rms(x[self.SR // 2:])
        assert ratio > 0.95

    def test_zero_input(self):
        for n in (0, 1, 7, 1000):
            y = apply_notch(np.zeros(n), self.F0, self.SR, self.BW)
            assert len(y) == n
            assert np.all(y == 0.0)

    @pytest.mark.parametrize("target, sample_rate, bandwidth", [
        (1000.0, 0, 50.0),
        (1000.0, -8000, 50.0),
        (1000.0, 8000, 0.0),
        (1000.0, 8000, -5.0),
        (1000.0, 8000, 4000.0),
        (5000.0, 8000, 50.0),
        (-1.0, 8000, 50.0),
    ])
    def test_invalid_parameters(self, target, sample_rate, bandwidth):
        with pytest.raises(InvalidParameterError):
            notch_coefficients(target, sample_rate, bandwidth)
        with pytest.raises(InvalidParameterError):
            apply_notch(np.ones(8), target, sample_rate, bandwidth)

    def test_degenerate_a0(self):
        with pytest.raises(NumericDegeneracyError):
            Biquad(BiquadCoefficients(1.0, 0.0, 0.0, 0.0, 0.5, 0.25))
        with pytest.raises(NumericDegeneracyError):
            Biquad(BiquadCoefficients(1.0, 0.0, 0.0, float('inf'), 0.0, 0.0))
        with pytest.raises(InvalidParameterError):
            Biquad((1.0, 2.0, 3.0))

    def test_rejects_nan_input(self):
        with pytest.raises(InvalidParameterError):
            apply_notch([0.0, float('nan')], self.F0, self.SR, self.BW)

    def test_reset_mode(self):
        rng = np.random.default_rng(1)
        x = rng.standard_normal(1000)
        f = NotchFilter(self.F0, self.SR, self.BW)

        f.process(x[:500])
        second = f.process(x[500:])
        np.testing.assert_allclose(second, apply_notch(x[500:], self.F0, self.SR, self.BW))

    def test_continue_mode(self):
        rng = np.random.default_rng(2)
        x = rng.standard_normal(1000)
        f = NotchFilter(self.F0, self.SR, self.BW)

        first = f.process(x[:300])
        second = f.process(x[300:], reset=False)
        np.testing.assert_allclose(
            np.concatenate([first, second]),
            apply_notch(x, self.F0, self.SR, self.BW),
            atol=1e-12
        )

    def test_state_and_reset(self):
        f = NotchFilter(self.F0, self.SR, self.BW)
        np.testing.assert_array_equal(f.state, np.zeros(4))

        y = f.process([1.0, 2.0, 3.0])
        np.testing.assert_allclose(f.state, [3.0, 2.0, y[2], y[1]])

        f.reset()
        np.testing.assert_array_equal(f.state, np.zeros(4))


class TestFIR:
    """Test suite for the fixed-tap FIR filter."""

    def test_default_taps(self):
        f = FIRFilter()
        assert f.tap_count == 5
        np.testing.assert_array_equal(f.coefficients, DEFAULT_TAPS)
        np.testing.assert_array_equal(f.coefficients, f.coefficients[::-1])

    def test_single_tap_identity(self):
        rng = np.random.default_rng(0)
        x = rng.standard_normal(257)
        np.testing.assert_array_equal(apply_fir(x, [1.0]), x)

    def test_impulse_response(self):
        impulse = np.zeros(8)
        impulse[0] = 1.0
        np.testing.assert_allclose(apply_fir(impulse), [0.1, 0.2, 0.4, 0.2, 0.1, 0.0, 0.0, 0.0])

    def test_matches_lfilter(self):
        rng = np.random.default_rng(1)
        x = rng.standard_normal(2048)
        taps = [0.05, -0.3, 0.8, 0.25, -0.1, 0.02, 0.4]

        error = np.abs(apply_fir(x, taps) - lfilter(taps, [1.0], x))
        print(f"\n[FIR vs lfilter] Max error: {error.max():.2e}")
        assert error.max() < 1e-12

    def test_zero_padded_start(self):
        y = apply_fir(np.ones(10))
        np.testing.assert_allclose(y[:4], [0.1, 0.3, 0.7, 0.9])
        np.testing.assert_allclose(y[4:], 1.0)

    def test_zero_input(self):
        for n in (0, 1, 3, 100):
            y = apply_fir(np.zeros(n))
            assert len(y) == n
            assert np.all(y == 0.0)

    def test_history(self):
        f = FIRFilter()
        f.process([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        np.testing.assert_array_equal(f.history, [6.0, 5.0, 4.0, 3.0])

        f.reset()
        np.testing.assert_array_equal(f.history, np.zeros(4))

    def test_continue_mode(self):
        rng = np.random.default_rng(2)
        x = rng.standard_normal(500)
        f = FIRFilter()

        first = f.process(x[:123])
        second = f.process(x[123:], reset=False)
        np.testing.assert_allclose(np.concatenate([first, second]), apply_fir(x), atol=1e-12)

    def test_coefficients_are_immutable(self):
        taps = [0.25, 0.5, 0.25]
        f = FIRFilter(taps)
        taps[0] = 10.0
        assert f.coefficients[0] == 0.25

        with pytest.raises(ValueError):
            f.coefficients[0] = 1.0

    def test_independent_instances(self):
        a = FIRFilter()
        b = FIRFilter()
        a.process(np.ones(10))
        np.testing.assert_array_equal(b.history, np.zeros(4))

    @pytest.mark.parametrize("taps", [[], [[0.5, 0.5]], [0.5, float('nan')], ['a', 'b']])
    def test_invalid_taps(self, taps):
        with pytest.raises(InvalidParameterError):
            FIRFilter(taps)
