"""Bulk loading of JSON lines work records into the works index."""

from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import Iterator, List

from loguru import logger
from pydantic import ValidationError

from fandomvis.scrape.models import Work
from fandomvis.storage.works_index import WorksIndex
from fandomvis.utils.config import Config


def read_works(path: Path) -> Iterator[Work]:
    """Yield works from a JSON lines file, skipping blank lines.

    Raises:
        ValueError: If a line is not a valid work record (message carries the line number)
    """
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                yield Work.from_json_line(line)
            except ValidationError as exc:
                raise ValueError(f"{path}:{line_number}: invalid work record: {exc}") from exc


def chunked(works: Iterator[Work], size: int) -> Iterator[List[Work]]:
    while True:
        chunk = list(islice(works, size))
        if not chunk:
            return
        yield chunk


class IndexPipeline:
    """Upload work records to the index in chunks."""

    def __init__(self, config: Config, *, index: WorksIndex | None = None) -> None:
        self.config = config
        self.index = index or WorksIndex(config.index)

    def run(self, input_path: Path | None = None, *, create_collection: bool = True) -> int:
        input_path = Path(input_path or self.config.works_path)
        if not input_path.exists():
            raise FileNotFoundError(f"Works file not found: {input_path}")

        if create_collection:
            self.index.create_collection()

        chunk_size = self.config.index.chunk_size
        total = 0
        for chunk_index, chunk in enumerate(chunked(read_works(input_path), chunk_size)):
            total += self.index.upsert_works(chunk, batch_size=chunk_size)
            logger.info(
                "Processed chunk {} ({} documents)",
                chunk_index,
                total,
            )

        logger.info("Indexed {} works from {}", total, input_path)
        return total
