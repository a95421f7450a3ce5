"""
Exception types raised by sigchain.

Every error is local to the call that raised it; no component retries or
recovers internally.
"""


class SignalError(Exception):
    """Base class for all sigchain errors."""


class InvalidParameterError(SignalError, ValueError):
    """A sample rate, duration, frequency, bandwidth or buffer is out of range."""


class InputLengthError(SignalError, ValueError):
    """A spectral buffer is not a power of two and strict mode was requested."""


class NumericDegeneracyError(SignalError, ArithmeticError):
    """Filter coefficients would make the difference equation divide by zero."""
