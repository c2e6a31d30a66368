"""
CLI entry point for framespot.

Run with:
    python -m framespot spots.csv
    python -m framespot spots.csv --config tracking_config.yaml
    framespot spots.csv --config tracking_config.yaml -o tracks.csv
"""

import argparse
import logging
import os
import sys

from .config import get_default_config, load_config
from .exceptions import FramespotError
from .pipeline import TrackingPipeline
from .tables import write_tracks_csv


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="framespot",
        description="framespot: frame-indexed spot linking and track analysis.",
    )
    parser.add_argument(
        "spots",
        help="Path to input spot table (CSV with frame, x, y columns).",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to YAML/JSON config file (default: built-in defaults).",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output CSV for linked tracks (default: no file written).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log linking progress to stderr.",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
    )

    # Validate input
    if not os.path.isfile(args.spots):
        print(f"Error: spot table not found: {args.spots}", file=sys.stderr)
        sys.exit(1)

    if args.config and not os.path.isfile(args.config):
        print(f"Error: config not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    # Load config and run pipeline
    try:
        config = load_config(args.config) if args.config else get_default_config()
        print(f"Processing: {args.spots}")
        if args.config:
            print(f"Config:     {args.config}")
        print()

        pipeline = TrackingPipeline(config)
        result = pipeline.process_file(args.spots)
    except FramespotError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Summary
    info = result.collection_info
    print(f"Spots:      {info['num_spots']} over {info['num_frames']} frames "
          f"({info['first_frame']} to {info['last_frame']})")
    print(f"Tracks:     {len(result.track_spots)} linked")
    print(f"Confirmed:  {len(result.confirmed_tracks)} tracks")
    print()

    for track_id, track in result.confirmed_tracks.items():
        print(f"  Track {track_id[:8]}  "
              f"{track.num_spots} spots, "
              f"frames {track.first_frame}-{track.last_frame}, "
              f"displacement={track.motion_metrics['net_displacement']:.1f}, "
              f"speed={track.motion_metrics['mean_speed']:.2f}")

    if not result.confirmed_tracks:
        print("  (no confirmed tracks)")

    if args.output:
        write_tracks_csv(result.track_spots, args.output, result.spot_frames)
        print()
        print(f"Output:     {args.output}")

    print()
    print("Done.")


if __name__ == "__main__":
    main()
