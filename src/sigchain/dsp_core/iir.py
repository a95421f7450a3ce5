"""
Second-order recursive (biquad) filters.

The notch filter attenuates a narrow band around a target frequency while
passing the rest of the spectrum. Coefficients follow the usual biquad
notch design:

    w = 2*pi*f0 / sr,  alpha = sin(pi * bandwidth / sr)
    b = [1, -2 cos w, 1],  a = [1 + alpha, -2 cos w, 1 - alpha]

and each output sample is

    y[n] = (b0 x[n] + b1 x[n-1] + b2 x[n-2] - a1 y[n-1] - a2 y[n-2]) / a0
"""

import math
from typing import NamedTuple

import numpy as np
from numba import jit

from ..exceptions import InvalidParameterError, NumericDegeneracyError
from ..utils.logging import get_logger
from ._checks import as_float, as_signal_buffer, require_positive

logger = get_logger(__name__)


class BiquadCoefficients(NamedTuple):
    b0: float
    b1: float
    b2: float
    a0: float
    a1: float
    a2: float


@jit(nopython=True, cache=True)
def _biquad_kernel(
    x: np.ndarray,
    b0: float, b1: float, b2: float,
    a0: float, a1: float, a2: float,
    state: np.ndarray
) -> np.ndarray:
    """
    Run the difference equation over x.

    state holds (x[n-1], x[n-2], y[n-1], y[n-2]) and is updated in place so
    that a later call can continue the stream.
    """
    y = np.empty(x.shape[0])
    x1 = state[0]
    x2 = state[1]
    y1 = state[2]
    y2 = state[3]

    for n in range(x.shape[0]):
        xn = x[n]
        yn = (b0 * xn + b1 * x1 + b2 * x2 - a1 * y1 - a2 * y2) / a0
        x2 = x1
        x1 = xn
        y2 = y1
        y1 = yn
        y[n] = yn

    state[0] = x1
    state[1] = x2
    state[2] = y1
    state[3] = y2
    return y


def notch_coefficients(
    target_frequency: float,
    sample_rate: float,
    bandwidth: float
) -> BiquadCoefficients:
    """
    Compute biquad notch coefficients.

    Args:
        target_frequency: Frequency to reject in Hz, within [0, sample_rate/2]
        sample_rate: Sample rate in Hz (> 0)
        bandwidth: Width of the rejection band in Hz, within (0, sample_rate/2)

    Returns:
        BiquadCoefficients (b0, b1, b2, a0, a1, a2)

    Raises:
        InvalidParameterError: if any parameter is out of range
    """
    sample_rate = require_positive('sample_rate', sample_rate)
    nyquist = sample_rate / 2

    target_frequency = as_float('target_frequency', target_frequency)
    if not 0 <= target_frequency <= nyquist:
        raise InvalidParameterError(
            f"target_frequency must be within [0, {nyquist}] Hz, got {target_frequency}"
        )

    bandwidth = as_float('bandwidth', bandwidth)
    if not 0 < bandwidth < nyquist:
        raise InvalidParameterError(
            f"bandwidth must be within (0, {nyquist}) Hz, got {bandwidth}"
        )

    omega = 2 * math.pi * target_frequency / sample_rate
    alpha = math.sin(math.pi * bandwidth / sample_rate)
    cos_omega = math.cos(omega)

    coeffs = BiquadCoefficients(
        b0=1.0,
        b1=-2.0 * cos_omega,
        b2=1.0,
        a0=1.0 + alpha,
        a1=-2.0 * cos_omega,
        a2=1.0 - alpha,
    )
    logger.debug(
        f"Notch f0={target_frequency} Hz, bw={bandwidth} Hz, sr={sample_rate} Hz: {coeffs}"
    )
    return coeffs


class Biquad:
    """
    Generic second-order IIR section with its own filter state.

    The state (x[n-1], x[n-2], y[n-1], y[n-2]) starts at zero. process()
    zeroes it before filtering unless reset=False is passed, in which case
    the stream continues from the end of the previous call.
    """

    def __init__(self, coefficients: BiquadCoefficients):
        values = tuple(as_float('coefficient', c) for c in coefficients)
        if len(values) != len(BiquadCoefficients._fields):
            raise InvalidParameterError(f"A biquad takes 6 coefficients, got {len(values)}")

        coefficients = BiquadCoefficients(*values)
        if not all(math.isfinite(c) for c in coefficients):
            raise NumericDegeneracyError(f"Non-finite biquad coefficients: {coefficients}")
        if coefficients.a0 == 0.0:
            raise NumericDegeneracyError("Biquad normalisation coefficient a0 is zero")

        self.coefficients = coefficients
        self._state = np.zeros(4)

    @property
    def state(self) -> np.ndarray:
        """Copy of (x[n-1], x[n-2], y[n-1], y[n-2])."""
        return self._state.copy()

    def reset(self) -> None:
        self._state[:] = 0.0

    def process(self, signal: np.ndarray, reset: bool = True) -> np.ndarray:
        """
        Filter a buffer.

        Args:
            signal: 1-D buffer of finite samples
            reset: Zero the filter history first (True) or continue the
                stream from the previous call (False)

        Returns:
            Filtered buffer, same length as the input
        """
        x = as_signal_buffer(signal)
        if reset:
            self.reset()

        c = self.coefficients
        return _biquad_kernel(x, c.b0, c.b1, c.b2, c.a0, c.a1, c.a2, self._state)


class NotchFilter(Biquad):
    """Biquad notch rejecting `target_frequency` with the given bandwidth."""

    def __init__(self, target_frequency: float, sample_rate: float, bandwidth: float):
        super().__init__(notch_coefficients(target_frequency, sample_rate, bandwidth))
        self.target_frequency = float(target_frequency)
        self.sample_rate = float(sample_rate)
        self.bandwidth = float(bandwidth)

    def __repr__(self) -> str:
        return (f"NotchFilter(target_frequency={self.target_frequency}, "
                f"sample_rate={self.sample_rate}, bandwidth={self.bandwidth})")


def apply_notch(
    signal: np.ndarray,
    target_frequency: float,
    sample_rate: float,
    bandwidth: float
) -> np.ndarray:
    """Notch-filter one buffer with fresh (zero) filter history."""
    return NotchFilter(target_frequency, sample_rate, bandwidth).process(signal)
