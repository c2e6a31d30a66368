"""
Tracking pipeline: spot collection → linked tracks + motion metrics.

Detection is NOT included: spots arrive in a SpotCollection (or a spot
table on disk) produced by an upstream detector.

Dependencies: numpy, scipy
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .analysis import analyze_track, passes_track_filters
from .collection import SpotCollection
from .config import get_default_config
from .spot import Spot
from .tables import read_spots_csv
from .tracker import SpotTracker

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT DATA CLASSES
# =============================================================================

@dataclass
class TrackResult:
    """Result for a single confirmed track."""
    track_id: str
    num_spots: int
    first_frame: int
    last_frame: int
    duration: float
    motion_metrics: Dict
    spots: List[Spot] = field(default_factory=list, repr=False)


@dataclass
class PipelineResult:
    """Complete pipeline output for one spot collection."""
    confirmed_tracks: Dict[str, TrackResult]
    track_spots: Dict[str, List[Spot]]
    spot_track_ids: Dict[int, str]
    spot_frames: Dict[int, int]
    collection_info: Dict


# =============================================================================
# TRACKING PIPELINE
# =============================================================================

class TrackingPipeline:
    """
    Stateful tracking pipeline.

    Processes spot collections through:
        1. Linking (frame loop)
        2. Motion analysis (confirm tracks)

    Usage:
        pipeline = TrackingPipeline(config)
        result = pipeline.process_file("spots.csv")

        for track_id, track in result.confirmed_tracks.items():
            print(track_id, track.num_spots, track.motion_metrics["mean_speed"])

        # A later collection continues the same tracks only if all its frames
        # come after the last linked frame; otherwise update() raises
        # ValueError. Call reset() before an unrelated collection.
        pipeline.reset()
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        Args:
            config: Tracking parameters dict, merged over the defaults.
                None = use defaults.
        """
        self.config = get_default_config()
        if config:
            self.config.update(config)
        self._tracker: Optional[SpotTracker] = None

    def process_file(self, path: str) -> PipelineResult:
        """Read a spot table and run the pipeline on it."""
        return self.process_collection(read_spots_csv(path))

    def process_collection(self, collection: SpotCollection) -> PipelineResult:
        """
        Run the full tracking pipeline on a collection.

        Args:
            collection: Spots to link, by frame

        Returns:
            PipelineResult with confirmed tracks and every linked path
        """
        collection_info = {
            "num_frames": len(collection),
            "num_spots": collection.get_n_spots(),
            "first_frame": collection.first_frame(),
            "last_frame": collection.last_frame(),
        }

        if self._tracker is None:
            self._tracker = SpotTracker(
                max_linking_distance=self.config["max_linking_distance"],
                max_gap_frames=self.config["max_gap_frames"],
                n_candidates=self.config["n_candidates"],
            )

        # =====================================================================
        # PHASE 1: Linking
        # =====================================================================
        track_spots: Dict[str, List[Spot]] = {}
        spot_track_ids: Dict[int, str] = {}
        spot_frames: Dict[int, int] = {}
        for frame, spots in collection.items():
            track_ids = self._tracker.update(collection, frame)
            for spot, track_id in zip(spots, track_ids):
                track_spots.setdefault(track_id, []).append(spot)
                spot_track_ids[spot.spot_id] = track_id
                spot_frames[spot.spot_id] = frame

        # =====================================================================
        # PHASE 2: Motion analysis
        # =====================================================================
        confirmed_tracks: Dict[str, TrackResult] = {}
        frame_interval = self.config["frame_interval"]
        for track_id, spots in track_spots.items():
            frames = [spot_frames[s.spot_id] for s in spots]
            metrics = analyze_track(spots, frames, frame_interval)
            passes, failed = passes_track_filters(metrics, self.config)
            if not passes:
                logger.debug("Track %s rejected by %s", track_id[:8], ", ".join(failed))
                continue
            confirmed_tracks[track_id] = TrackResult(
                track_id=track_id,
                num_spots=metrics["num_spots"],
                first_frame=metrics["first_frame"],
                last_frame=metrics["last_frame"],
                duration=metrics["duration"],
                motion_metrics={
                    k: metrics[k]
                    for k in ["net_displacement", "total_distance", "mean_speed",
                              "progression_ratio", "directional_variance"]
                },
                spots=spots,
            )

        logger.info(
            "Pipeline: %d spots, %d tracks, %d confirmed",
            collection_info["num_spots"], len(track_spots), len(confirmed_tracks),
        )
        return PipelineResult(
            confirmed_tracks=confirmed_tracks,
            track_spots=track_spots,
            spot_track_ids=spot_track_ids,
            spot_frames=spot_frames,
            collection_info=collection_info,
        )

    # =========================================================================
    # STATE MANAGEMENT
    # =========================================================================

    def reset(self) -> None:
        """Full reset, dropping tracker state."""
        self._tracker = None
