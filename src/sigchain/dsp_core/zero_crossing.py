"""
Zero-crossing frequency estimation.

The estimator consumes one sample per call. A crossing is counted when the
signal moves strictly above zero from <= 0, or strictly below zero from
>= 0. After every `window` samples it emits

    estimate = crossings / 2 * sample_rate / window

(two crossings per cycle; with the default one-second window this is just
crossings / 2) and starts counting again from zero.
"""

import math
from typing import Iterable, Iterator, List, Optional

from ..exceptions import InvalidParameterError
from ..utils.logging import get_logger
from ._checks import as_signal_buffer, require_positive

logger = get_logger(__name__)


class ZeroCrossingEstimator:
    """
    Streaming dominant-frequency estimator.

    Args:
        sample_rate: Sample rate of the incoming stream in Hz
        window: Samples per estimate; defaults to sample_rate rounded to a
            whole number of samples (at least 1), i.e. one estimate per second
    """

    def __init__(self, sample_rate: float, window: Optional[int] = None):
        self.sample_rate = require_positive('sample_rate', sample_rate)

        if window is None:
            window = max(1, int(round(self.sample_rate)))
        try:
            samples = float(window)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"window must be a positive integer, got {window!r}") from e
        if not samples.is_integer() or samples < 1:
            raise InvalidParameterError(f"window must be a positive integer, got {window!r}")
        self.window = int(samples)

        self.reset()

    def reset(self) -> None:
        # The first sample has no predecessor; treat it as following a zero
        self._previous = 0.0
        self._crossings = 0
        self._samples_seen = 0

    @property
    def crossings(self) -> int:
        return self._crossings

    @property
    def samples_seen(self) -> int:
        """Samples consumed since the last emitted estimate."""
        return self._samples_seen

    def observe(self, sample: float) -> Optional[float]:
        """
        Consume one sample.

        Returns:
            The frequency estimate in Hz when this sample completes a window,
            otherwise None
        """
        current = float(sample)
        if not math.isfinite(current):
            raise InvalidParameterError(f"Sample must be finite, got {sample}")

        previous = self._previous
        if (current > 0 and previous <= 0) or (current < 0 and previous >= 0):
            self._crossings += 1

        self._previous = current
        self._samples_seen += 1

        if self._samples_seen < self.window:
            return None

        estimate = self._crossings / 2 * self.sample_rate / self.window
        logger.debug(f"{self._crossings} crossings in {self.window} samples -> {estimate:.2f} Hz")
        self._crossings = 0
        self._samples_seen = 0
        return estimate

    def observe_block(self, samples: Iterable[float]) -> List[float]:
        """Consume a buffer and return every estimate emitted along the way."""
        estimates = []
        for sample in as_signal_buffer(samples):
            estimate = self.observe(sample)
            if estimate is not None:
                estimates.append(estimate)
        return estimates


def estimate_frequency(
    stream: Iterable[float],
    sample_rate: float,
    window: Optional[int] = None
) -> Iterator[Optional[float]]:
    """
    Lazily estimate frequency over a sample stream.

    Yields one value per consumed sample: None while a window is filling,
    the estimate in Hz on the sample that completes it. Parameters are
    checked when this is called, before the stream is touched.
    """
    estimator = ZeroCrossingEstimator(sample_rate, window=window)
    return (estimator.observe(sample) for sample in stream)
