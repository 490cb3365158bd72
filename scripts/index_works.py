#!/usr/bin/env python3
"""Bulk indexing CLI script.

Reads work records from a JSON lines file (as written by fetch_works.py) and
upserts them into the works collection in chunks.

Usage:
    python scripts/index_works.py
    python scripts/index_works.py --input data/works.jsonl --chunk-size 512
    python scripts/index_works.py --no-create
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from fandomvis.pipeline.index_pipeline import IndexPipeline
from fandomvis.utils.config import load_config
from fandomvis.utils.logging_setup import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Index work records from a JSON lines file",
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
        "--input",
        "-i",
        type=Path,
        default=None,
        help="JSON lines file to index (default: works_path from config)",
    )
    parser.add_argument(
        "--chunk-size", type=int, default=None, help="Works per upload (default: from config)"
    )
    parser.add_argument(
        "--no-create",
        action="store_true",
        help="Do not create the collection before indexing",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser.parse_args()


def main():
    args = parse_args()

    try:
        config = load_config(args.config)
        configure_logging(config.logging, verbose=args.verbose)
        if args.chunk_size is not None:
            if args.chunk_size < 1:
                logger.error("--chunk-size must be positive")
                return 2
            config.index.chunk_size = args.chunk_size

        pipeline = IndexPipeline(config)
        try:
            total = pipeline.run(args.input, create_collection=not args.no_create)
        finally:
            pipeline.index.close()

    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Indexing failed: {e}")
        return 1

    logger.success(f"Indexed {total} works")
    return 0


if __name__ == "__main__":
    sys.exit(main())
