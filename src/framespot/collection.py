"""
Frame-indexed spot storage with proximity queries.

A SpotCollection maps integer frames (kept in ascending order) to the
ordered list of spots detected in that frame. Querying a frame that is not
in the collection behaves as querying an empty frame.

Dependencies: numpy
"""

import bisect
import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from .spot import FRAME, Spot

logger = logging.getLogger(__name__)


class SpotCollection:
    """
    Ordered mapping from frame to the spots detected in that frame.

    Iterating a collection yields spots (frames ascending, in-frame order
    kept), not frame keys; use frames() for the keys.

    Usage:
        spots = SpotCollection()
        spots.put(0, [Spot(0, 0), Spot(10, 0)])
        spots.add(Spot(0, 1), frame=1)

        nearest = spots.get_closest_spot(Spot(0, 0), frame=0)
        candidates = spots.get_n_closest_spots(nearest, frame=1, n=3)
    """

    def __init__(self, content: Optional[Mapping[int, List[Spot]]] = None):
        """
        Args:
            content: Optional frame -> spot list mapping to wrap. The lists
                are stored as given, not copied.
        """
        self._content: Dict[int, List[Spot]] = {}
        self._frames: List[int] = []
        if content:
            self.put_all(content)

    # =========================================================================
    # PROXIMITY QUERIES
    # =========================================================================

    def get_closest_spot(self, location: Spot, frame: int) -> Optional[Spot]:
        """
        Return the spot of `frame` closest to `location`.

        Ties go to the spot that comes first in the frame. Returns None if
        the frame holds no spot.
        """
        min_dist = float("inf")
        target = None
        for spot in self._content.get(frame) or ():
            d2 = spot.square_distance_to(location)
            if d2 < min_dist:
                min_dist = d2
                target = spot
        return target

    def get_n_closest_spots(self, location: Spot, frame: int, n: int) -> List[Spot]:
        """
        Return up to `n` spots of `frame`, by increasing distance to `location`.

        Equidistant spots are all kept, in their order within the frame. A
        shorter list is returned when the frame holds fewer than `n` spots.
        """
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        spots = self._content.get(frame)
        if not spots or n == 0:
            return []
        d2 = np.array([s.square_distance_to(location) for s in spots], dtype=np.float64)
        order = np.argsort(d2, kind="stable")[:n]
        return [spots[i] for i in order]

    def get_frame(self, spot: Spot) -> Optional[int]:
        """Return the frame holding `spot`, or None if it is not in this collection."""
        for frame in self._frames:
            if spot in (self._content[frame] or ()):
                return frame
        return None

    def get_n_spots(self) -> int:
        """Total number of spots over all frames."""
        return sum(len(spots or ()) for spots in self._content.values())

    def get_all_spots(self) -> List[Spot]:
        """New list of every spot, frames ascending, in-frame order kept."""
        all_spots: List[Spot] = []
        for frame in self._frames:
            all_spots.extend(self._content[frame] or ())
        return all_spots

    def __iter__(self) -> Iterator[Spot]:
        for frame in list(self._frames):
            yield from self._content.get(frame) or ()

    def iter_frame(self, frame: int) -> Iterator[Spot]:
        """Iterate over the spots of one frame. An absent frame yields nothing."""
        return iter(self._content.get(frame) or ())

    # =========================================================================
    # SPOT MUTATORS
    # =========================================================================

    def add(self, spot: Spot, frame: int) -> None:
        """Append `spot` to `frame`, creating the frame if needed."""
        spots = self._content.get(frame)
        if spots is None:
            spots = []
            self.put(frame, spots)
        spots.append(spot)
        spot.put_feature(FRAME, frame)

    def remove_spot(self, spot: Spot, frame: Optional[int] = None) -> bool:
        """
        Remove `spot` from `frame` (or from whichever frame holds it).

        Returns:
            True if the spot was found and removed.
        """
        if frame is None:
            frame = self.get_frame(spot)
            if frame is None:
                return False
        spots = self._content.get(frame)
        if not spots or spot not in spots:
            return False
        spots.remove(spot)
        return True

    @classmethod
    def from_spots(cls, frame_spots: Iterable[Tuple[int, Spot]]) -> "SpotCollection":
        """Build a collection from (frame, spot) pairs, keeping their order."""
        collection = cls()
        count = 0
        for frame, spot in frame_spots:
            collection.add(spot, frame)
            count += 1
        logger.debug("Built collection of %d spots over %d frames", count, len(collection))
        return collection

    # =========================================================================
    # ORDERED MAPPING
    # =========================================================================

    def put(self, frame: int, spots: List[Spot]) -> Optional[List[Spot]]:
        """Store `spots` at `frame`. Returns the list it replaced, if any."""
        previous = self._content.get(frame)
        if frame not in self._content:
            bisect.insort(self._frames, frame)
        self._content[frame] = spots
        return previous

    def put_all(self, content: Mapping[int, List[Spot]]) -> None:
        for frame, spots in content.items():
            self.put(frame, spots)

    def get(self, frame: int, default: Optional[List[Spot]] = None) -> Optional[List[Spot]]:
        return self._content.get(frame, default)

    def remove(self, frame: int) -> Optional[List[Spot]]:
        """Drop `frame`. Returns its spot list, or None if it was absent."""
        if frame not in self._content:
            return None
        del self._frames[bisect.bisect_left(self._frames, frame)]
        return self._content.pop(frame)

    def contains_frame(self, frame: int) -> bool:
        return frame in self._content

    def contains_spots(self, spots: List[Spot]) -> bool:
        """True if some frame holds exactly this spot sequence."""
        return any(stored == spots for stored in self._content.values())

    def sub_map(self, from_frame: int, to_frame: int) -> "SpotCollection":
        """Frames in [from_frame, to_frame). The spot lists are shared."""
        lo = bisect.bisect_left(self._frames, from_frame)
        hi = bisect.bisect_left(self._frames, to_frame)
        return self._slice(lo, hi)

    def head_map(self, to_frame: int) -> "SpotCollection":
        """Frames strictly before `to_frame`."""
        return self._slice(0, bisect.bisect_left(self._frames, to_frame))

    def tail_map(self, from_frame: int) -> "SpotCollection":
        """Frames from `from_frame` onwards."""
        return self._slice(bisect.bisect_left(self._frames, from_frame), len(self._frames))

    def first_frame(self) -> Optional[int]:
        return self._frames[0] if self._frames else None

    def last_frame(self) -> Optional[int]:
        return self._frames[-1] if self._frames else None

    def frames(self) -> List[int]:
        return list(self._frames)

    def values(self) -> List[List[Spot]]:
        return [self._content[frame] for frame in self._frames]

    def items(self) -> List[Tuple[int, List[Spot]]]:
        return [(frame, self._content[frame]) for frame in self._frames]

    def clear(self) -> None:
        self._content.clear()
        self._frames.clear()

    def is_empty(self) -> bool:
        return not self._content

    def __len__(self) -> int:
        return len(self._content)

    def __contains__(self, frame: object) -> bool:
        return frame in self._content

    def __getitem__(self, frame: int) -> List[Spot]:
        return self._content[frame]

    def __setitem__(self, frame: int, spots: List[Spot]) -> None:
        self.put(frame, spots)

    def __delitem__(self, frame: int) -> None:
        if frame not in self._content:
            raise KeyError(frame)
        self.remove(frame)

    def __repr__(self) -> str:
        return f"SpotCollection(frames={len(self)}, spots={self.get_n_spots()})"

    # -- internals --

    def _slice(self, lo: int, hi: int) -> "SpotCollection":
        return SpotCollection({frame: self._content[frame] for frame in self._frames[lo:hi]})
