#!/usr/bin/env python3
"""Ship proportion CLI script.

Charts the monthly count of works for the most popular ships.

Usage:
    python scripts/ship_proportion.py
    python scripts/ship_proportion.py --limit 10 --output-dir data/reports/proportion
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fandomvis.pipeline.proportion_pipeline import ProportionPipeline  # noqa: E402
from fandomvis.utils.config import load_config  # noqa: E402
from fandomvis.utils.logging_setup import configure_logging  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Chart monthly work counts of the top ships",
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
        "--limit", type=int, default=None, help="Number of ships to chart (default: from config)"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory (default: <reports_path>/proportion)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging, verbose=args.verbose)

    output_dir = args.output_dir or config.reports_path / "proportion"

    try:
        pipeline = ProportionPipeline(config)
    except ConnectionError as e:
        logger.error(str(e))
        return 1

    try:
        artifacts = pipeline.run(output_dir=output_dir, limit=args.limit)
    except Exception as e:
        logger.error(f"Proportion chart failed: {e}")
        return 1
    finally:
        pipeline.index.close()

    logger.info("Done. Chart: {}", artifacts["chart_html"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
