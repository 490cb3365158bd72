#!/usr/bin/env python3
"""Search page fetching CLI script.

Fetches a range of archive search pages, extracts the works on each page and
writes them to a JSON lines file. The run stops at the first page without
works or at the first page that fails.

Usage:
    python scripts/fetch_works.py --start 1 --count 50
    python scripts/fetch_works.py --count 200 --threads 4 --interval 5
    python scripts/fetch_works.py --fandom "Avatar: The Last Airbender" --output data/works.jsonl
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fandomvis.pipeline.fetch_pipeline import FetchPipeline  # noqa: E402
from fandomvis.utils.config import load_config  # noqa: E402
from fandomvis.utils.logging_setup import configure_logging  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch archive search pages into a JSON lines file",
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
    parser.add_argument("--start", type=int, default=1, help="First page to fetch (1-based)")
    parser.add_argument("--count", type=int, default=1, help="Number of pages to fetch")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds to wait after each page (default: from config)",
    )
    parser.add_argument(
        "--threads", type=int, default=None, help="Pages fetched concurrently (default: from config)"
    )
    parser.add_argument("--fandom", default=None, help="Fandom filter (default: from config)")
    parser.add_argument("--creators", default=None, help="Creator filter (default: from config)")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output JSON lines file (default: works_path from config)",
    )
    parser.add_argument(
        "--append", action="store_true", help="Append to the output file instead of replacing it"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    try:
        config = load_config(args.config)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1
    configure_logging(config.logging, verbose=args.verbose)

    if args.interval is not None:
        config.scrape.interval_seconds = args.interval
    if args.threads is not None:
        config.scrape.threads = max(1, args.threads)
    if args.fandom is not None:
        config.scrape.fandom = args.fandom
    if args.creators is not None:
        config.scrape.creators = args.creators

    output_path = args.output or config.works_path
    output_path.parent.mkdir(parents=True, exist_ok=True)

    pipeline = FetchPipeline(config)
    try:
        with open(output_path, "a" if args.append else "w", encoding="utf-8") as output:
            result = pipeline.run(output, start=args.start, count=args.count)
    except ValueError as e:
        logger.error(f"Invalid arguments: {e}")
        return 2
    finally:
        pipeline.fetcher.close()

    logger.info(f"Works written to {output_path}")
    return 0 if result.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
