"""
framespot: frame-indexed spot storage and tracking core.

Provides a frame-ordered spot collection with nearest-neighbour queries,
Hungarian frame-to-frame linking, and per-track motion metrics.
No image processing: spots come from an upstream detector.

Dependencies: numpy, scipy, pyyaml
"""

from .spot import (
    Spot,
    POSITION_X,
    POSITION_Y,
    POSITION_Z,
    POSITION_T,
    FRAME,
    QUALITY,
    RADIUS,
)
from .collection import SpotCollection
from .config import (
    DEFAULT_TRACKING_CONFIG,
    get_default_config,
    build_tracking_params,
    load_config,
)
from .exceptions import (
    FramespotError,
    ConfigError,
    UnknownConfigKeyError,
    SpotTableError,
)
from .tracker import (
    Track,
    SpotTracker,
)
from .analysis import (
    analyze_track,
    passes_track_filters,
)
from .tables import (
    read_spots_csv,
    write_spots_csv,
    write_tracks_csv,
)
from .pipeline import (
    TrackResult,
    PipelineResult,
    TrackingPipeline,
)

__all__ = [
    # Spot
    "Spot",
    "POSITION_X",
    "POSITION_Y",
    "POSITION_Z",
    "POSITION_T",
    "FRAME",
    "QUALITY",
    "RADIUS",
    # Collection
    "SpotCollection",
    # Config
    "DEFAULT_TRACKING_CONFIG",
    "get_default_config",
    "build_tracking_params",
    "load_config",
    # Errors
    "FramespotError",
    "ConfigError",
    "UnknownConfigKeyError",
    "SpotTableError",
    # Tracker
    "Track",
    "SpotTracker",
    # Analysis
    "analyze_track",
    "passes_track_filters",
    # Tables
    "read_spots_csv",
    "write_spots_csv",
    "write_tracks_csv",
    # Pipeline
    "TrackResult",
    "PipelineResult",
    "TrackingPipeline",
]
