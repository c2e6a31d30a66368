"""
Per-track motion metrics.

Dependencies: numpy
"""

from typing import Dict, List, Optional, Tuple

import numpy as np

from .spot import FRAME, Spot


# =============================================================================
# PATH METRICS
# =============================================================================

def calculate_progression_ratio(path: np.ndarray) -> float:
    """High = linear progression (directed), Low = backtracking (confined)."""
    if len(path) < 2:
        return 0.0
    net = np.linalg.norm(path[-1] - path[0])
    max_dist = max(np.linalg.norm(p - path[0]) for p in path)
    return float(net / (max_dist + 1e-6))


def calculate_directional_variance(path: np.ndarray) -> float:
    """Low = consistent direction, High = random walk. Computed in the xy plane."""
    if len(path) < 2:
        return 1.0
    steps = np.diff(path[:, :2], axis=0)
    moving = np.any(steps != 0, axis=1)
    if not np.any(moving):
        return 1.0
    directions = np.arctan2(steps[moving, 1], steps[moving, 0])
    return float(1 - np.sqrt(np.mean(np.sin(directions)) ** 2 + np.mean(np.cos(directions)) ** 2))


def analyze_track(
    spots: List[Spot],
    frames: Optional[List[int]] = None,
    frame_interval: float = 1.0,
) -> Dict:
    """
    Compute motion metrics for a track.

    Args:
        spots: Track spots in frame order
        frames: Frame of each spot. None = read each spot's FRAME feature
        frame_interval: Time units per frame

    Returns:
        Dict of metrics (empty if the track has no spot)
    """
    if not spots:
        return {}

    path = np.array([s.position for s in spots], dtype=np.float64)
    if frames is None:
        frames = [int(s.get_feature(FRAME) or 0) for s in spots]
    steps = np.linalg.norm(np.diff(path, axis=0), axis=1) if len(path) > 1 else np.zeros(0)
    total_distance = float(steps.sum())
    duration = (frames[-1] - frames[0]) * frame_interval

    return {
        "num_spots": len(spots),
        "first_frame": frames[0],
        "last_frame": frames[-1],
        "duration": duration,
        "net_displacement": float(np.linalg.norm(path[-1] - path[0])),
        "total_distance": total_distance,
        "mean_speed": total_distance / duration if duration > 0 else 0.0,
        "progression_ratio": calculate_progression_ratio(path),
        "directional_variance": calculate_directional_variance(path),
    }


def passes_track_filters(metrics: Dict, params: Dict) -> Tuple[bool, List[str]]:
    """Check a track's metrics against the filters. Returns (passes, failed filter names)."""
    failed = []
    if metrics.get("num_spots", 0) < params["min_track_length"]:
        failed.append("min_track_length")
    if metrics.get("net_displacement", 0.0) < params["min_displacement"]:
        failed.append("min_displacement")
    return not failed, failed
