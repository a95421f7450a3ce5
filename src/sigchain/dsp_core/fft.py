"""
Radix-2 FFT Implementation using Numba JIT

This module implements the Cooley-Tukey FFT algorithm for the spectral
inspection of signal buffers. The production path is iterative:
1. Bit-reversal permutation of the input
2. In-place butterflies for stage sizes 2, 4, ..., N
3. Numba JIT compilation (nopython mode, cached)

fft_recursive() is the textbook even/odd decomposition, kept as a readable
reference that the iterative core is tested against.

Buffers whose length is not a power of two are zero-padded to the next power
of two, or rejected with InputLengthError when strict=True.
"""

import math
from typing import Optional, Tuple

import numpy as np
from numba import jit

from ..exceptions import InputLengthError, InvalidParameterError
from ..utils.logging import get_logger
from ._checks import as_signal_buffer, require_positive

logger = get_logger(__name__)


@jit(nopython=True, cache=True)
def _bit_reverse(x: int, n_bits: int) -> int:
    """Reverse the bits of x with n_bits."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result


@jit(nopython=True, cache=True)
def _fft_radix2_iter(x: np.ndarray) -> np.ndarray:
    """
    Iterative Cooley-Tukey radix-2 DIT FFT (Numba JIT).

    len(x) must be a power of two >= 2.
    """
    N = len(x)
    n_bits = int(math.log2(N))

    # Bit-reversal permutation
    X = np.empty(N, dtype=np.complex128)
    for i in range(N):
        X[_bit_reverse(i, n_bits)] = x[i]

    stage_size = 2
    while stage_size <= N:
        half_size = stage_size // 2

        for k in range(0, N, stage_size):
            for j in range(half_size):
                # Recompute each twiddle instead of accumulating w *= w_step
                w = np.exp(-2j * np.pi * j / stage_size)
                even = X[k + j]
                odd = X[k + j + half_size] * w

                X[k + j] = even + odd
                X[k + j + half_size] = even - odd

        stage_size *= 2

    return X


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def _as_spectral_buffer(x, n: Optional[int], strict: bool) -> np.ndarray:
    """Validate, pad/truncate to `n` and apply the power-of-two policy."""
    x = as_signal_buffer(x, dtype=np.complex128)

    if n is not None:
        try:
            length = float(n)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"n must be a non-negative integer, got {n!r}") from e
        if not length.is_integer() or length < 0:
            raise InvalidParameterError(f"n must be a non-negative integer, got {n!r}")
        n = int(length)
        if len(x) < n:
            x = np.pad(x, (0, n - len(x)), mode='constant', constant_values=0)
        else:
            x = x[:n]

    N = len(x)
    if N > 1 and not is_power_of_two(N):
        if strict:
            raise InputLengthError(f"FFT length must be a power of two, got {N}")
        padded = next_power_of_two(N)
        logger.debug(f"Zero-padding spectral buffer from {N} to {padded} samples")
        x = np.pad(x, (0, padded - N), mode='constant', constant_values=0)

    return x


def fft(x: np.ndarray, n: Optional[int] = None, strict: bool = False) -> np.ndarray:
    """
    Compute the 1-D discrete Fourier Transform using radix-2 Cooley-Tukey.

    Parameters
    ----------
    x : np.ndarray
        Input samples (real or complex), 1-D
    n : int, optional
        Pad with zeros or truncate to this length before transforming.
    strict : bool
        If True, a length that is not a power of two raises
        InputLengthError instead of being zero-padded.

    Returns
    -------
    np.ndarray
        complex128 spectrum in natural frequency-bin order. Its length is the
        (possibly padded) transform length. The input is never modified.

    Examples
    --------
    >>> fft([1.0, 0.0, 0.0, 0.0])
    array([1.+0.j, 1.+0.j, 1.+0.j, 1.+0.j])
    """
    x = _as_spectral_buffer(x, n, strict)

    if len(x) <= 1:
        return x.copy()

    return _fft_radix2_iter(x)


def fft_recursive(x: np.ndarray) -> np.ndarray:
    """
    Recursive even/odd Cooley-Tukey FFT.

    Base case: length <= 1 is returned unchanged. Otherwise the even- and
    odd-indexed halves are transformed and combined with
    out[k] = E[k] + w*O[k], out[k + N/2] = E[k] - w*O[k], w = exp(-2*pi*i*k/N).
    Requires a power-of-two length.
    """
    x = np.asarray(x, dtype=np.complex128)
    N = len(x)

    if N <= 1:
        return x.copy()
    if not is_power_of_two(N):
        raise InputLengthError(f"FFT length must be a power of two, got {N}")

    even = fft_recursive(x[0::2])
    odd = fft_recursive(x[1::2])
    twiddled = np.exp(-2j * np.pi * np.arange(N // 2) / N) * odd

    return np.concatenate([even + twiddled, even - twiddled])


def ifft(X: np.ndarray, n: Optional[int] = None, strict: bool = False) -> np.ndarray:
    """
    Compute the 1-D inverse discrete Fourier Transform.

    IFFT(X) = conj(FFT(conj(X))) / N
    """
    X = _as_spectral_buffer(X, n, strict)
    N = len(X)

    if N == 0:
        return X.copy()

    return np.conj(fft(np.conj(X))) / N


def rfft(x: np.ndarray, n: Optional[int] = None, strict: bool = False) -> np.ndarray:
    """
    Compute the FFT of a real signal.

    Returns only the non-negative frequency terms (N // 2 + 1 bins of the
    padded transform length N).
    """
    x = as_signal_buffer(x)
    X = fft(x, n=n, strict=strict)
    return X[:len(X) // 2 + 1]


def fft_frequencies(n_fft: int, sample_rate: float) -> np.ndarray:
    """Centre frequencies (Hz) of the n_fft // 2 + 1 bins returned by rfft."""
    sample_rate = require_positive('sample_rate', sample_rate)
    if n_fft < 1:
        raise InvalidParameterError(f"n_fft must be >= 1, got {n_fft}")
    return np.arange(n_fft // 2 + 1) * sample_rate / n_fft


def magnitude_spectrum(
    x: np.ndarray,
    sample_rate: float,
    n_fft: Optional[int] = None,
    strict: bool = False
) -> Tuple[np.ndarray, np.ndarray]:
    """
    One-sided magnitude spectrum of a real buffer.

    Args:
        x: Real input buffer
        sample_rate: Sample rate in Hz
        n_fft: Transform length (defaults to len(x), padded per `strict`)
        strict: Reject non-power-of-two lengths instead of padding

    Returns:
        (frequencies in Hz, |X|) for each one-sided bin
    """
    X = rfft(x, n=n_fft, strict=strict)
    transform_length = max(2 * (len(X) - 1), 1)
    return fft_frequencies(transform_length, sample_rate)[:len(X)], np.abs(X)


def peak_frequency(
    x: np.ndarray,
    sample_rate: float,
    n_fft: Optional[int] = None,
    strict: bool = False
) -> float:
    """
    Frequency (Hz) of the strongest non-DC bin of a real buffer.

    Returns 0.0 when the buffer is too short to have a non-DC bin.
    """
    freqs, mags = magnitude_spectrum(x, sample_rate, n_fft=n_fft, strict=strict)
    if len(mags) < 2:
        return 0.0
    return float(freqs[1 + int(np.argmax(mags[1:]))])
