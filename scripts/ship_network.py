#!/usr/bin/env python3
"""Ship network CLI script.

Aggregates relationship tags from the works index into a character
co-occurrence matrix and writes the ship network report:
- chord diagram HTML
- merged ship counts (JSON)
- co-occurrence matrix (CSV)
- GraphViz DOT network
- Markdown summary

Usage:
    python scripts/ship_network.py
    python scripts/ship_network.py --min-works 20 --limit 500 --ship-kind platonic
    python scripts/ship_network.py --output-dir data/reports/custom
"""

from __future__ import annotations

import argparse
import sys
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fandomvis.pipeline.ship_network_pipeline import (  # noqa: E402
    ShipNetworkParameters,
    ShipNetworkPipeline,
)
from fandomvis.ships.ship_parser import ShipKind  # noqa: E402
from fandomvis.utils.config import load_config  # noqa: E402
from fandomvis.utils.logging_setup import configure_logging  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Build the character ship network and write a report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config/config.yaml"),
        help="Path to configuration file (default: config/config.yaml)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory (default: <reports_path>/ship_network/<timestamp>)",
    )
    parser.add_argument(
        "--min-works",
        type=int,
        default=None,
        help="Ignore relationship tags on fewer works (default: from config)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Max relationship tags to aggregate (default: from config)",
    )
    parser.add_argument(
        "--ship-kind",
        choices=[kind.value for kind in ShipKind],
        default=None,
        help="Ship kind to chart (default: from config)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging, verbose=args.verbose)

    params = ShipNetworkParameters(
        min_works=int(args.min_works if args.min_works is not None else config.ships.min_works),
        limit=int(args.limit if args.limit is not None else config.ships.limit),
        ship_kind=ShipKind(args.ship_kind or config.ships.ship_kind),
    )

    output_dir = args.output_dir
    if output_dir is None:
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
        output_dir = config.reports_path / "ship_network" / timestamp

    try:
        pipeline = ShipNetworkPipeline(config)
    except ConnectionError as e:
        logger.error(str(e))
        return 1

    try:
        report = pipeline.run(output_dir=output_dir, parameters=params)
    except Exception as e:
        logger.error(f"Ship network report failed: {e}")
        return 1
    finally:
        pipeline.index.close()

    logger.info(
        "Done. Reports: MD={}, HTML={}",
        report.artifacts.get("report_markdown"),
        report.artifacts.get("chord_html"),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
