"""
Finite impulse response (fixed-tap) filtering.
"""

from typing import Sequence

import numpy as np
from numba import jit

from ..exceptions import InvalidParameterError
from ._checks import as_signal_buffer

# Symmetric 5-tap low-pass smoother, unity DC gain
DEFAULT_TAPS = (0.1, 0.2, 0.4, 0.2, 0.1)


@jit(nopython=True, cache=True)
def _fir_kernel(x: np.ndarray, coeffs: np.ndarray, register: np.ndarray) -> np.ndarray:
    """
    Shift-register convolution.

    register[i] holds x[n - i] while output n is computed; it is updated in
    place so a later call can continue the stream.
    """
    n_taps = coeffs.shape[0]
    y = np.empty(x.shape[0])

    for n in range(x.shape[0]):
        for i in range(n_taps - 1, 0, -1):
            register[i] = register[i - 1]
        register[0] = x[n]

        acc = 0.0
        for i in range(n_taps):
            acc += coeffs[i] * register[i]
        y[n] = acc

    return y


def _as_taps(coefficients: Sequence[float]) -> np.ndarray:
    try:
        taps = np.array(coefficients, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"FIR coefficients are not numeric: {e}") from e

    if taps.ndim != 1 or len(taps) == 0:
        raise InvalidParameterError(f"FIR coefficients must be a non-empty 1D sequence, got shape {taps.shape}")
    if not np.all(np.isfinite(taps)):
        raise InvalidParameterError("FIR coefficients contain NaN or infinite values")

    taps.setflags(write=False)
    return taps


class FIRFilter:
    """
    Fixed-tap FIR filter.

    output[n] = sum_i coefficients[i] * x[n - i]

    Samples before the start of the stream count as zero. The coefficients
    are copied into a read-only array at construction, so one tuple of taps
    can configure any number of independent filters.
    """

    def __init__(self, coefficients: Sequence[float] = DEFAULT_TAPS):
        self.coefficients = _as_taps(coefficients)
        self._register = np.zeros(len(self.coefficients))

    @property
    def tap_count(self) -> int:
        return len(self.coefficients)

    @property
    def history(self) -> np.ndarray:
        """Copy of the last tap_count - 1 inputs, newest first."""
        return self._register[:self.tap_count - 1].copy()

    def reset(self) -> None:
        self._register[:] = 0.0

    def process(self, signal: np.ndarray, reset: bool = True) -> np.ndarray:
        """
        Filter a buffer.

        Args:
            signal: 1-D buffer of finite samples
            reset: Zero the shift register first (True) or continue the
                stream from the previous call (False)

        Returns:
            Filtered buffer, same length as the input
        """
        x = as_signal_buffer(signal)
        if reset:
            self.reset()
        return _fir_kernel(x, self.coefficients, self._register)

    def __repr__(self) -> str:
        return f"FIRFilter(coefficients={self.coefficients.tolist()})"


def apply_fir(signal: np.ndarray, coefficients: Sequence[float] = DEFAULT_TAPS) -> np.ndarray:
    """FIR-filter one buffer with a zeroed shift register."""
    return FIRFilter(coefficients).process(signal)
