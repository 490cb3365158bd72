#!/usr/bin/env python3
"""Significant tags CLI script.

For each of the most popular ships, lists the tags of the chosen kind that
are over-represented among works carrying that ship. The Markdown report is
printed and written to disk.

Usage:
    python scripts/significant_tags.py
    python scripts/significant_tags.py --tag-kind freeform --limit 10
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fandomvis.pipeline.significant_tags_pipeline import SignificantTagsPipeline  # noqa: E402
from fandomvis.scrape.models import TagKind  # noqa: E402
from fandomvis.utils.config import load_config  # noqa: E402
from fandomvis.utils.logging_setup import configure_logging  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Report significant tags for the top ships",
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
        "--tag-kind",
        choices=[kind.value for kind in TagKind],
        default=TagKind.RELATIONSHIP.value,
        help="Kind of tags to score (default: relationship)",
    )
    parser.add_argument(
        "--limit", type=int, default=None, help="Number of ships (default: from config)"
    )
    parser.add_argument(
        "--tag-limit", type=int, default=None, help="Tags per ship (default: from config)"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Markdown output file (default: <reports_path>/significant_tags.md)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging, verbose=args.verbose)

    output_path = args.output or config.reports_path / "significant_tags.md"

    try:
        pipeline = SignificantTagsPipeline(config)
    except ConnectionError as e:
        logger.error(str(e))
        return 1

    try:
        markdown = pipeline.run(
            tag_kind=TagKind(args.tag_kind),
            output_path=output_path,
            ship_limit=args.limit,
            tag_limit=args.tag_limit,
        )
    except Exception as e:
        logger.error(f"Significant tags report failed: {e}")
        return 1
    finally:
        pipeline.index.close()

    print(markdown)
    return 0


if __name__ == "__main__":
    sys.exit(main())
