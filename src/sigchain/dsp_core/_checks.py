"""Argument checks shared by the dsp_core modules."""

import math

import numpy as np

from ..exceptions import InvalidParameterError


def as_float(name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from e


def require_positive(name: str, value: float) -> float:
    value = as_float(name, value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive finite number, got {value}")
    return value


def require_non_negative(name: str, value: float) -> float:
    value = as_float(name, value)
    if not math.isfinite(value) or value < 0:
        raise InvalidParameterError(f"{name} must be a non-negative finite number, got {value}")
    return value


def as_signal_buffer(signal, dtype=np.float64) -> np.ndarray:
    """Return `signal` as a 1-D array of `dtype`, rejecting NaN/inf samples."""
    try:
        buffer = np.asarray(signal, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Signal is not numeric: {e}") from e

    if buffer.ndim != 1:
        raise InvalidParameterError(f"Input must be 1D, got shape {buffer.shape}")
    if not np.all(np.isfinite(buffer)):
        raise InvalidParameterError("Signal contains NaN or infinite samples")
    return buffer
