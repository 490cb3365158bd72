#!/usr/bin/env python3
"""Index setup script for initializing the Qdrant works collection.

This script creates the works collection and its payload indexes. It can be
run multiple times safely (idempotent) unless --recreate is given.

Usage:
    python scripts/setup_index.py [--recreate]

Environment variables:
    QDRANT_LOCATION - Local storage path or ":memory:" (optional)
    QDRANT_HOST - Qdrant host (default: localhost)
    QDRANT_PORT - Qdrant port (default: 6333)
    QDRANT_API_KEY - Qdrant API key (optional)
    WORKS_COLLECTION - Collection name (default: works)
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from fandomvis.storage.works_index import WorksIndex
from fandomvis.utils.config import load_config
from fandomvis.utils.logging_setup import configure_logging


def setup_index(config, *, recreate: bool = False) -> bool:
    """Create the works collection.

    Args:
        config: Application configuration
        recreate: Whether to drop and recreate the collection

    Returns:
        True if setup successful, False otherwise
    """
    logger.info("Setting up works index...")

    index = None
    try:
        index = WorksIndex(config.index)
        index.create_collection(recreate=recreate)

        is_healthy, message = index.health_check()
        if is_healthy:
            logger.success("Works index setup completed successfully")
            return True
        logger.error(f"Works index health check failed: {message}")
        return False

    except Exception as e:
        logger.error(f"Works index setup failed: {e}")
        return False
    finally:
        if index is not None:
            index.close()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Initialize the Qdrant works collection and payload indexes.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config/config.yaml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Drop and recreate the works collection (deletes indexed works).",
    )
    return parser.parse_args()


def main():
    """Main setup function."""
    try:
        args = parse_args()
        config = load_config(args.config)
        configure_logging(config.logging)
        logger.info("Configuration loaded successfully")

        if setup_index(config, recreate=args.recreate):
            logger.info("You can now run scripts/index_works.py")
            return 0
        logger.error("Index setup failed. Check logs above for details.")
        return 1

    except Exception as e:
        logger.error(f"Setup failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
