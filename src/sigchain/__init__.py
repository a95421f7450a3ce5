"""
sigchain - a small signal-processing toolkit

Waveform synthesis, radix-2 FFT, biquad notch and fixed-tap FIR filtering,
and zero-crossing frequency estimation, composable into a processing chain.
"""

from .dsp_core import (
    generate_sine,
    fft,
    ifft,
    rfft,
    apply_notch,
    apply_fir,
    estimate_frequency,
    NotchFilter,
    FIRFilter,
    ZeroCrossingEstimator,
)
from .exceptions import (
    SignalError,
    InvalidParameterError,
    InputLengthError,
    NumericDegeneracyError,
)
from .pipeline import PipelineConfig, PipelineResult, SignalChain

__all__ = [
    'generate_sine',
    'fft',
    'ifft',
    'rfft',
    'apply_notch',
    'apply_fir',
    'estimate_frequency',
    'NotchFilter',
    'FIRFilter',
    'ZeroCrossingEstimator',
    'SignalError',
    'InvalidParameterError',
    'InputLengthError',
    'NumericDegeneracyError',
    'PipelineConfig',
    'PipelineResult',
    'SignalChain',
]

__version__ = '1.0.0'
