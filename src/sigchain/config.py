"""
Pipeline configuration.

Configuration files are YAML documents with the same nested layout as
DEFAULT_CONFIG; any key left out keeps its default.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .exceptions import InvalidParameterError

DEFAULT_CONFIG: Dict[str, Any] = {
    'seed': None,
    'source': {
        'frequency': 440.0,
        'sample_rate': 44100,
        'duration': 2.0,
        'amplitude': 1.0,
        'tones': [],            # extra (frequency, amplitude) components
        'noise_snr_db': None,   # None = no noise
    },
    'filter': {
        'kind': 'notch',        # 'notch', 'fir' or 'none'
        'notch_frequency': 60.0,
        'bandwidth': 10.0,
        'taps': [0.1, 0.2, 0.4, 0.2, 0.1],
    },
    'estimator': {
        'window': None,         # None = one window per second of signal
    },
    'spectrum': {
        'enabled': True,
        'n_fft': None,
        'strict': False,
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge `override` into a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a YAML file, filling gaps from DEFAULT_CONFIG."""
    with open(config_path, 'r') as f:
        try:
            loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidParameterError(f"Config file {config_path} is not valid YAML: {e}") from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise InvalidParameterError(
            f"Config file {config_path} must contain a mapping, got {type(loaded).__name__}"
        )
    return merge_config(DEFAULT_CONFIG, loaded)
