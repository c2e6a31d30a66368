"""
Spot and track tables.

Spot tables are CSV files with a header row. `frame`, `x` and `y` are
required; `z` and `name` are optional; any other column is read as a
float feature (empty cells are skipped).

Dependencies: none
"""

import csv
import logging
import os
from typing import Dict, List, Optional

from .collection import SpotCollection
from .exceptions import SpotTableError
from .spot import FRAME, Spot

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("frame", "x", "y")
RESERVED_COLUMNS = ("frame", "x", "y", "z", "name")
TRACK_COLUMNS = ["track_id", "spot_id", "frame", "x", "y", "z"]


def read_spots_csv(path: str) -> SpotCollection:
    """Read a spot table into a new SpotCollection."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Spot table not found: {path}")

    collection = SpotCollection()
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise SpotTableError("empty spot table", path=path)
        missing = [c for c in REQUIRED_COLUMNS if c not in reader.fieldnames]
        if missing:
            raise SpotTableError(f"missing columns: {', '.join(missing)}", path=path)
        feature_columns = [c for c in reader.fieldnames if c not in RESERVED_COLUMNS]

        for row in reader:
            line = reader.line_num
            try:
                frame = int(row["frame"])
                spot = Spot(
                    x=float(row["x"]),
                    y=float(row["y"]),
                    z=float(row["z"]) if row.get("z") else 0.0,
                    name=row.get("name") or None,
                    features={
                        c: float(row[c]) for c in feature_columns if row.get(c) not in (None, "")
                    },
                )
            except (TypeError, ValueError) as e:
                raise SpotTableError(f"bad value: {e}", path=path, line=line) from e
            collection.add(spot, frame)

    logger.info("Read %d spots over %d frames from %s", collection.get_n_spots(), len(collection), path)
    return collection


def write_spots_csv(collection: SpotCollection, path: str) -> None:
    """Write a collection as a spot table, frames ascending."""
    features = sorted({
        name for spot in collection for name in spot.features if name != FRAME
    })
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["frame", "name", "x", "y", "z"] + features)
        for frame, spots in collection.items():
            for spot in spots:
                writer.writerow(
                    [frame, spot.name or "", spot.x, spot.y, spot.z]
                    + [spot.features.get(name, "") for name in features]
                )


def write_tracks_csv(
    track_spots: Dict[str, List[Spot]],
    path: str,
    spot_frames: Optional[Dict[int, int]] = None,
) -> None:
    """Write one row per tracked spot. Frames come from `spot_frames` or the FRAME feature."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(TRACK_COLUMNS)
        for track_id, spots in track_spots.items():
            for spot in spots:
                if spot_frames is not None and spot.spot_id in spot_frames:
                    frame = spot_frames[spot.spot_id]
                else:
                    frame = spot.get_feature(FRAME)
                writer.writerow([
                    track_id, spot.spot_id, int(frame) if frame is not None else "",
                    spot.x, spot.y, spot.z,
                ])
    logger.debug("Wrote %d tracks to %s", len(track_spots), path)
