"""Paginated search page fetching into a JSON lines file.

Pages are fetched `threads` at a time and written in page order. The run stops at
the first page with no works (results exhausted) or at the first page that fails
to download or parse; works from earlier pages are kept.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, TextIO

from loguru import logger

from fandomvis.scrape.fetcher import FetchError, SearchPageFetcher
from fandomvis.scrape.models import Work
from fandomvis.scrape.work_extractor import WorkExtractionError
from fandomvis.utils.config import Config


@dataclass
class FetchResult:
    pages_fetched: int = 0
    works_written: int = 0
    last_page: Optional[int] = None
    exhausted: bool = False
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class FetchPipeline:
    """Fetch a range of search pages and stream their works as JSON lines."""

    def __init__(self, config: Config, *, fetcher: SearchPageFetcher | None = None) -> None:
        self.config = config
        self.fetcher = fetcher or SearchPageFetcher(config.scrape)

    def run(self, output: TextIO, *, start: int = 1, count: int = 1) -> FetchResult:
        if start < 1:
            raise ValueError(f"Page numbers start at 1, got {start}")

        threads = max(1, self.config.scrape.threads)
        end = start + count
        result = FetchResult()

        with ThreadPoolExecutor(max_workers=threads) as executor:
            for window_start in range(start, end, threads):
                page_numbers = range(window_start, min(window_start + threads, end))
                futures = [(number, executor.submit(self.fetcher.fetch_page, number)) for number in page_numbers]
                if not self._consume_window(futures, output, result):
                    for _, future in futures:
                        future.cancel()
                    break

        logger.info(
            "Fetched {} pages, wrote {} works (last page: {})",
            result.pages_fetched,
            result.works_written,
            result.last_page,
        )
        return result

    def _consume_window(
        self,
        futures: List[tuple[int, Future]],
        output: TextIO,
        result: FetchResult,
    ) -> bool:
        """Write finished pages in order; return False when the run should stop."""
        for page_number, future in futures:
            try:
                works: List[Work] = future.result()
            except WorkExtractionError as exc:
                logger.error(
                    "Failed to extract works from page {}: {} (field={}, selector={})",
                    page_number,
                    exc,
                    exc.field,
                    exc.selector,
                )
                result.error = str(exc)
                return False
            except FetchError as exc:
                logger.error("Failed to fetch page {}: {}", page_number, exc)
                result.error = str(exc)
                return False

            if not works:
                logger.info("Received no works on page {}, stopping", page_number)
                result.exhausted = True
                return False

            for work in works:
                output.write(work.to_json_line())
                output.write("\n")
            output.flush()

            result.pages_fetched += 1
            result.works_written += len(works)
            result.last_page = page_number
        return True
