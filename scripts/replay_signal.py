"""
Replay a recorded signal from a CSV file through an assurance detector.

Example:
    python scripts/replay_signal.py samples.csv --column ipc --quorum 0.5
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from src.assurance import AssuranceDetector, DetectorTag, detection_ticks, replay
from src.core.config import config
from src.core.exceptions import ConfigurationError
from src.core.logging_config import setup_logging


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a signal through an assurance detector.")
    parser.add_argument("csv_path", type=Path, help="CSV file holding the signal")
    parser.add_argument("--column", default=None, help="Column to replay (default: first column)")
    parser.add_argument("--window-size", type=int, default=None)
    parser.add_argument("--max-checkpoints", type=int, default=None)
    parser.add_argument("--fraction-threshold", type=float, default=None)
    parser.add_argument("--severity-fraction", type=float, default=None)
    parser.add_argument("--near-fraction", type=float, default=None)
    parser.add_argument("--quorum", type=float, default=None)
    parser.add_argument("--baseline-statistic", choices=["median", "mean"], default=None)
    parser.add_argument(
        "--reset-on-detection",
        action="store_true",
        help="Reset the detector after every detection",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write the per-tick trace as CSV")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logger = setup_logging("src.assurance")

    frame = pd.read_csv(args.csv_path)
    column = args.column or frame.columns[0]
    if column not in frame.columns:
        logger.error("Column %s not found in %s", column, args.csv_path)
        return 2

    overrides = {
        "window_size": args.window_size,
        "max_checkpoints": args.max_checkpoints,
        "fraction_threshold": args.fraction_threshold,
        "severity_fraction": args.severity_fraction,
        "near_fraction": args.near_fraction,
        "quorum": args.quorum,
        "baseline_statistic": args.baseline_statistic,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}

    try:
        detector = AssuranceDetector(
            config=config.detector,
            tag=DetectorTag(module="replay", name=str(column)),
            **overrides,
        )
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2

    trace = replay(detector, frame[column].astype(float), reset_on_detection=args.reset_on_detection)
    ticks = detection_ticks(trace)

    print(f"Replayed {len(trace)} samples from {args.csv_path} [{column}]")
    print(f"Detections: {len(ticks)}")
    if ticks:
        print(f"Detection ticks: {', '.join(str(t) for t in ticks)}")

    if args.output is not None:
        trace.to_csv(args.output, index=False)
        print(f"Trace written to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
