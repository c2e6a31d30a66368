"""
Tracking configuration.

Parameters are plain dicts: defaults below, overridden from keyword
arguments or from a YAML/JSON file.

Dependencies: pyyaml
"""

import json
import logging
from typing import Dict

import yaml

from .exceptions import ConfigError, UnknownConfigKeyError

logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================

DEFAULT_TRACKING_CONFIG = {
    # Linking
    "max_linking_distance": 15.0,
    "max_gap_frames": 2,
    "n_candidates": 5,

    # Track filters
    "min_track_length": 3,
    "min_displacement": 0.0,

    # Time calibration (time units per frame)
    "frame_interval": 1.0,
}


def get_default_config() -> Dict:
    """Return a copy of the default tracking configuration."""
    return DEFAULT_TRACKING_CONFIG.copy()


def build_tracking_params(**kwargs) -> Dict:
    """Build tracking parameters from defaults + overrides."""
    params = get_default_config()
    for key, value in kwargs.items():
        if key in params:
            params[key] = value
        else:
            raise UnknownConfigKeyError(key)
    return params


def load_config(path: str) -> Dict:
    """Load a YAML or JSON config file and merge with defaults."""
    with open(path) as f:
        try:
            if path.endswith((".yaml", ".yml")):
                overrides = yaml.safe_load(f) or {}
            else:
                overrides = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not parse config {path}: {e}") from e
    if not isinstance(overrides, dict):
        raise ConfigError(f"Config {path} must contain a mapping, got {type(overrides).__name__}")
    logger.debug("Loaded %d config overrides from %s", len(overrides), path)
    return build_tracking_params(**overrides)
