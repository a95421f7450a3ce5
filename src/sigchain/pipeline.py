"""
Signal processing chain.

    source -> {notch | FIR | passthrough} -> zero-crossing estimator

with the spectral transform applied to the raw and filtered buffers for
offline inspection.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .dsp_core import (
    DEFAULT_TAPS,
    FIRFilter,
    NotchFilter,
    ZeroCrossingEstimator,
    add_noise,
    generate_sine,
    generate_tones,
    peak_frequency,
)
from .exceptions import InvalidParameterError
from .utils.logging import get_logger

logger = get_logger(__name__)

FILTER_KINDS = ('notch', 'fir', 'none')


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return config[name] as a mapping; a missing or empty section is {}."""
    section = config.get(name, None)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InvalidParameterError(
            f"Config section '{name}' must be a mapping, got {type(section).__name__}"
        )
    return section


def _whole(value: Any) -> int:
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"{value!r} is not a whole number")
    return int(number)


def _number(section: Dict[str, Any], key: str, default: Any, cast=float) -> Any:
    """Convert section[key] with `cast`; None (or a missing key) gives `default`."""
    value = section.get(key, None)
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Config value '{key}' is invalid: {value!r}") from e


@dataclass
class PipelineConfig:
    """Parameters for one run of the chain."""
    # Source
    frequency: float = 440.0
    sample_rate: float = 44100.0
    duration: float = 2.0
    amplitude: float = 1.0
    tones: List[Tuple[float, float]] = field(default_factory=list)
    noise_snr_db: Optional[float] = None
    seed: Optional[int] = None
    # Filter stage
    filter_kind: str = 'notch'
    notch_frequency: float = 60.0
    bandwidth: float = 10.0
    taps: Tuple[float, ...] = DEFAULT_TAPS
    # Estimator
    window: Optional[int] = None
    # Spectrum
    spectrum: bool = True
    n_fft: Optional[int] = None
    strict_fft: bool = False

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'PipelineConfig':
        """
        Build from a nested config mapping (see sigchain.config.DEFAULT_CONFIG).

        Raises:
            InvalidParameterError: if a section is not a mapping or a value
                cannot be converted to the expected type
        """
        source_cfg = _section(config, 'source')
        filter_cfg = _section(config, 'filter')
        estimator_cfg = _section(config, 'estimator')
        spectrum_cfg = _section(config, 'spectrum')

        defaults = cls()

        taps = filter_cfg.get('taps', None)
        if taps is None:
            taps = defaults.taps
        tones = source_cfg.get('tones', None)
        if tones is None:
            tones = []

        try:
            return cls(
                frequency=_number(source_cfg, 'frequency', defaults.frequency),
                sample_rate=_number(source_cfg, 'sample_rate', defaults.sample_rate),
                duration=_number(source_cfg, 'duration', defaults.duration),
                amplitude=_number(source_cfg, 'amplitude', defaults.amplitude),
                tones=list(tones),
                noise_snr_db=_number(source_cfg, 'noise_snr_db', None),
                seed=_number(config, 'seed', None, cast=int),
                filter_kind=str(filter_cfg.get('kind', defaults.filter_kind)).lower(),
                notch_frequency=_number(filter_cfg, 'notch_frequency', defaults.notch_frequency),
                bandwidth=_number(filter_cfg, 'bandwidth', defaults.bandwidth),
                taps=tuple(taps),
                window=_number(estimator_cfg, 'window', None, cast=_whole),
                spectrum=bool(spectrum_cfg.get('enabled', defaults.spectrum)),
                n_fft=_number(spectrum_cfg, 'n_fft', None, cast=_whole),
                strict_fft=bool(spectrum_cfg.get('strict', defaults.strict_fft)),
            )
        except TypeError as e:
            raise InvalidParameterError(f"Invalid pipeline configuration: {e}") from e


@dataclass
class PipelineResult:
    raw: np.ndarray
    filtered: np.ndarray
    estimates: List[float]
    raw_peak_hz: Optional[float] = None
    filtered_peak_hz: Optional[float] = None

    @property
    def n_samples(self) -> int:
        return len(self.raw)


class SignalChain:
    """
    Runs the configured source, filter stage and estimator.

    The filter and estimator are built once in the constructor, so parameter
    errors surface before any signal is generated.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config if config is not None else PipelineConfig()
        self.filter = self._build_filter()
        self.estimator = ZeroCrossingEstimator(self.config.sample_rate, window=self.config.window)

    def _build_filter(self) -> Optional[Union[NotchFilter, FIRFilter]]:
        cfg = self.config
        if cfg.filter_kind == 'notch':
            return NotchFilter(cfg.notch_frequency, cfg.sample_rate, cfg.bandwidth)
        if cfg.filter_kind == 'fir':
            return FIRFilter(cfg.taps)
        if cfg.filter_kind == 'none':
            return None
        raise InvalidParameterError(
            f"Unknown filter kind {cfg.filter_kind!r}, expected one of {FILTER_KINDS}"
        )

    def generate(self) -> np.ndarray:
        """Synthesize the source buffer."""
        cfg = self.config
        y = generate_sine(cfg.frequency, cfg.sample_rate, cfg.duration, amplitude=cfg.amplitude)
        if cfg.tones:
            y = y + generate_tones(cfg.tones, cfg.sample_rate, cfg.duration)
        if cfg.noise_snr_db is not None:
            y = add_noise(y, float(cfg.noise_snr_db), seed=cfg.seed)
        return y

    def apply_filter(self, y: np.ndarray) -> np.ndarray:
        if self.filter is None:
            return np.array(y, dtype=np.float64)
        return self.filter.process(y)

    def inspect(self, y: np.ndarray) -> float:
        """Peak frequency (Hz) of a buffer."""
        cfg = self.config
        return peak_frequency(y, cfg.sample_rate, n_fft=cfg.n_fft, strict=cfg.strict_fft)

    def run(self) -> PipelineResult:
        cfg = self.config
        logger.info(
            f"Running chain: {cfg.frequency} Hz tone, sr={cfg.sample_rate}, "
            f"duration={cfg.duration}s, filter={cfg.filter_kind}"
        )

        raw = self.generate()
        filtered = self.apply_filter(raw)

        self.estimator.reset()
        estimates = self.estimator.observe_block(filtered)
        logger.info(f"{len(estimates)} frequency estimates: {estimates}")

        result = PipelineResult(raw=raw, filtered=filtered, estimates=estimates)
        if cfg.spectrum and len(raw) > 0:
            result.raw_peak_hz = self.inspect(raw)
            result.filtered_peak_hz = self.inspect(filtered)
            logger.info(
                f"Spectral peak: raw {result.raw_peak_hz:.2f} Hz, "
                f"filtered {result.filtered_peak_hz:.2f} Hz"
            )

        return result
