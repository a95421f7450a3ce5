"""
Waveform synthesis.

Produces sampled sine waves (and sums of them) from analytic parameters, plus
an additive-noise helper for exercising the filters on imperfect input.
"""

import math
from typing import Iterable, Optional, Tuple

import numpy as np

from ..exceptions import InvalidParameterError
from ._checks import as_float, as_signal_buffer, require_non_negative, require_positive


def n_samples_for(sample_rate: float, duration: float) -> int:
    """Number of samples in `duration` seconds: floor(sample_rate * duration)."""
    sample_rate = require_positive('sample_rate', sample_rate)
    duration = require_non_negative('duration', duration)
    return int(math.floor(sample_rate * duration))


def generate_sine(
    frequency: float,
    sample_rate: float,
    duration: float,
    amplitude: float = 1.0,
    phase: float = 0.0
) -> np.ndarray:
    """
    Generate a sampled sine wave.

    output[n] = amplitude * sin(2*pi*frequency*n / sample_rate + phase)

    Args:
        frequency: Tone frequency in Hz (>= 0)
        sample_rate: Sample rate in Hz (> 0)
        duration: Length in seconds (>= 0)
        amplitude: Peak amplitude
        phase: Initial phase in radians

    Returns:
        float64 array of floor(sample_rate * duration) samples

    Raises:
        InvalidParameterError: on a negative frequency or duration, or a
            non-positive sample rate
    """
    frequency = require_non_negative('frequency', frequency)
    amplitude = as_float('amplitude', amplitude)
    phase = as_float('phase', phase)
    n_samples = n_samples_for(sample_rate, duration)

    n = np.arange(n_samples)
    return amplitude * np.sin(2 * np.pi * frequency * n / float(sample_rate) + phase)


def generate_tones(
    components: Iterable[Tuple[float, float]],
    sample_rate: float,
    duration: float
) -> np.ndarray:
    """
    Sum several sine components.

    Args:
        components: (frequency, amplitude) pairs
        sample_rate: Sample rate in Hz
        duration: Length in seconds

    Returns:
        The summed waveform; all zeros if `components` is empty
    """
    y = np.zeros(n_samples_for(sample_rate, duration))
    for component in components:
        try:
            frequency, amplitude = component
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(
                f"Tone components must be (frequency, amplitude) pairs, got {component!r}"
            ) from e
        y += generate_sine(frequency, sample_rate, duration, amplitude=amplitude)
    return y


def add_noise(
    y: np.ndarray,
    snr_db: float,
    seed: Optional[int] = None
) -> np.ndarray:
    """
    Add gaussian noise to a signal at the specified SNR.

    Args:
        y: Input signal
        snr_db: Target signal-to-noise ratio in dB
        seed: Seed for the noise generator (None draws fresh entropy)

    Returns:
        Noisy copy of the signal
    """
    y = as_signal_buffer(y)
    if not math.isfinite(snr_db):
        raise InvalidParameterError(f"snr_db must be finite, got {snr_db}")
    if len(y) == 0:
        return y.copy()

    # SNR = 10 * log10(signal_power / noise_power)
    signal_power = np.mean(y ** 2)
    noise_power = signal_power / (10 ** (snr_db / 10))

    rng = np.random.default_rng(seed)
    return y + rng.normal(0.0, np.sqrt(noise_power), len(y))
