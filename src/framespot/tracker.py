"""
Frame-to-frame spot linking using the Hungarian algorithm.

Candidate matches for each open track come from the collection's
n-closest query on the track's last spot; the assignment minimises the
summed squared displacement. Tracks survive up to `max_gap_frames`
missing frames before being retired.

Dependencies: numpy, scipy
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
from scipy.optimize import linear_sum_assignment

from .collection import SpotCollection
from .spot import Spot

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class Track:
    """Track with metadata."""
    track_id: str
    first_frame: int = 0
    last_frame: int = 0
    is_active: bool = True
    spots: List[Spot] = field(default_factory=list, repr=False)

    def extend(self, spot: Spot, frame: int) -> None:
        self.spots.append(spot)
        self.last_frame = frame


# =============================================================================
# TRACKER
# =============================================================================

class SpotTracker:
    """
    Spot linker using Hungarian algorithm for optimal assignment.

    Features:
        - Candidate pruning through SpotCollection.get_n_closest_spots
        - Gap closing over up to max_gap_frames missing frames
        - Incremental (update per frame) or batch (track) operation
    """

    def __init__(
        self,
        max_linking_distance: float = 15.0,
        max_gap_frames: int = 2,
        n_candidates: int = 5,
    ):
        if max_linking_distance <= 0:
            raise ValueError(f"max_linking_distance must be > 0, got {max_linking_distance}")
        if max_gap_frames < 0:
            raise ValueError(f"max_gap_frames must be >= 0, got {max_gap_frames}")
        if n_candidates < 1:
            raise ValueError(f"n_candidates must be >= 1, got {n_candidates}")
        self.max_linking_distance = max_linking_distance
        self.max_d2 = max_linking_distance ** 2
        self.max_gap_frames = max_gap_frames
        self.n_candidates = n_candidates

        # State
        self.open_tracks: Dict[str, Spot] = {}
        self.all_tracks: Dict[str, Track] = {}
        self.last_frame: Optional[int] = None

    def update(self, collection: SpotCollection, frame: int) -> List[str]:
        """
        Link the spots of `frame` to the open tracks.

        Args:
            collection: Collection holding the frame's spots
            frame: Frame to link; must come after previously linked frames

        Returns:
            List of track IDs corresponding to each spot of the frame
        """
        if self.last_frame is not None and frame <= self.last_frame:
            raise ValueError(f"Frame {frame} is not after last linked frame {self.last_frame}")
        self._retire_stale_tracks(frame)
        self.last_frame = frame

        spots = collection.get(frame) or []
        if not spots:
            return []

        track_ids: List[Optional[str]] = [None] * len(spots)
        links = self._assign(collection, frame, spots) if self.open_tracks else []
        for i, tid in links:
            track_ids[i] = tid
            self.open_tracks[tid] = spots[i]
            self.all_tracks[tid].extend(spots[i], frame)

        for i, spot in enumerate(spots):
            if track_ids[i] is None:
                track_ids[i] = self._create_track(spot, frame)

        logger.debug(
            "Frame %d: %d spots, %d linked, %d open tracks",
            frame, len(spots), len(links), len(self.open_tracks),
        )
        return track_ids

    def track(self, collection: SpotCollection) -> Dict[str, Track]:
        """Link every frame of the collection, in ascending order."""
        for frame in collection.frames():
            self.update(collection, frame)
        logger.info(
            "Linked %d spots over %d frames into %d tracks",
            collection.get_n_spots(), len(collection), len(self.all_tracks),
        )
        return dict(self.all_tracks)

    def get_stats(self) -> Dict:
        """Current tracking statistics."""
        return {
            "open_tracks": len(self.open_tracks),
            "retired_tracks": sum(1 for t in self.all_tracks.values() if not t.is_active),
            "total_tracks": len(self.all_tracks),
            "last_frame": self.last_frame,
        }

    def reset(self) -> None:
        self.open_tracks = {}
        self.all_tracks = {}
        self.last_frame = None

    # -- internals --

    def _assign(self, collection, frame, spots):
        """Return (spot index, track id) pairs from the Hungarian assignment."""
        track_ids = list(self.open_tracks)
        column = {id(s): j for j, s in enumerate(spots)}
        blocked = self.max_d2 * 10 + 1.0
        cost = np.full((len(track_ids), len(spots)), blocked)

        for i, tid in enumerate(track_ids):
            last = self.open_tracks[tid]
            for candidate in collection.get_n_closest_spots(last, frame, self.n_candidates):
                d2 = candidate.square_distance_to(last)
                if d2 > self.max_d2:
                    break
                cost[i, column[id(candidate)]] = d2

        row_idx, col_idx = linear_sum_assignment(cost)
        return [
            (int(j), track_ids[i])
            for i, j in zip(row_idx, col_idx)
            if cost[i, j] <= self.max_d2
        ]

    def _create_track(self, spot, frame):
        track_id = str(uuid.uuid4())
        self.all_tracks[track_id] = Track(
            track_id=track_id, first_frame=frame, last_frame=frame, spots=[spot]
        )
        self.open_tracks[track_id] = spot
        return track_id

    def _retire_stale_tracks(self, frame):
        remove = [
            tid for tid in self.open_tracks
            if frame - self.all_tracks[tid].last_frame - 1 > self.max_gap_frames
        ]
        for tid in remove:
            self.all_tracks[tid].is_active = False
            del self.open_tracks[tid]
