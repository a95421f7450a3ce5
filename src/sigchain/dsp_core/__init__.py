"""
DSP Core Module - Hand-written signal generation, transform and filter kernels

Modules:
    - oscillator: sampled sine synthesis and additive noise
    - fft: radix-2 Cooley-Tukey FFT and spectral inspection helpers
    - iir: biquad notch (adaptive rejection) filter
    - fir: fixed-tap FIR filter
    - zero_crossing: streaming zero-crossing frequency estimator
"""

from .oscillator import generate_sine, generate_tones, add_noise, n_samples_for
from .fft import (
    fft,
    fft_recursive,
    ifft,
    rfft,
    fft_frequencies,
    magnitude_spectrum,
    peak_frequency,
    is_power_of_two,
    next_power_of_two,
)
from .iir import BiquadCoefficients, Biquad, NotchFilter, notch_coefficients, apply_notch
from .fir import DEFAULT_TAPS, FIRFilter, apply_fir
from .zero_crossing import ZeroCrossingEstimator, estimate_frequency

__all__ = [
    # Signal source
    'generate_sine',
    'generate_tones',
    'add_noise',
    'n_samples_for',
    # FFT functions
    'fft',
    'fft_recursive',
    'ifft',
    'rfft',
    'fft_frequencies',
    'magnitude_spectrum',
    'peak_frequency',
    'is_power_of_two',
    'next_power_of_two',
    # Filters
    'BiquadCoefficients',
    'Biquad',
    'NotchFilter',
    'notch_coefficients',
    'apply_notch',
    'DEFAULT_TAPS',
    'FIRFilter',
    'apply_fir',
    # Estimation
    'ZeroCrossingEstimator',
    'estimate_frequency',
]
