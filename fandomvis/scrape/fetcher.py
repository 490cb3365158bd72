"""HTTP retrieval of archive search pages."""

from __future__ import annotations

import time
from typing import Callable, Dict, List
from urllib.parse import urlencode

import requests
from loguru import logger

from fandomvis.scrape.models import Work
from fandomvis.scrape.work_extractor import search_page_to_works
from fandomvis.utils.config import ScrapeConfig

ENDPOINT_AO3 = "https://archiveofourown.org"


class FetchError(RuntimeError):
    """A search page could not be retrieved."""

    def __init__(self, page_number: int, message: str) -> None:
        self.page_number = page_number
        super().__init__(f"Page {page_number}: {message}")


def search_params(number: int, fandom: str, creators: str = "") -> Dict[str, str]:
    """Query parameters for one search page, oldest works first."""
    return {
        "commit": "Search",
        "page": str(number),
        "utf8": "✓",
        "work_search[bookmarks_count]": "",
        "work_search[character_names]": "",
        "work_search[comments_count]": "",
        "work_search[complete]": "",
        "work_search[creators]": creators,
        "work_search[crossover]": "",
        "work_search[fandom_names]": fandom,
        "work_search[freeform_names]": "",
        "work_search[hits]": "",
        "work_search[kudos_count]": "",
        "work_search[language_id]": "",
        "work_search[query]": "",
        "work_search[rating_ids]": "",
        "work_search[relationship_names]": "",
        "work_search[revised_at]": "",
        "work_search[single_chapter]": "0",
        "work_search[sort_column]": "created_at",
        "work_search[sort_direction]": "asc",
        "work_search[title]": "",
        "work_search[word_count]": "",
    }


def page_url(endpoint: str, number: int, fandom: str, creators: str = "") -> str:
    """URL of search page `number` (1-based)."""
    return f"{endpoint.rstrip('/')}/works/search?{urlencode(search_params(number, fandom, creators))}"


class SearchPageFetcher:
    """Fetch and parse search pages with a shared `requests.Session`."""

    def __init__(
        self,
        config: ScrapeConfig | None = None,
        *,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or ScrapeConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})
        self._sleep = sleep

    def url_for(self, page_number: int) -> str:
        return page_url(
            self.config.endpoint,
            page_number,
            self.config.fandom,
            self.config.creators,
        )

    def fetch_html(self, page_number: int) -> str:
        """GET one page, retrying with exponential backoff."""
        url = self.url_for(page_number)
        attempts = max(1, self.config.retry_attempts)
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                response = self.session.get(url, timeout=self.config.timeout)
                response.raise_for_status()
                return response.text
            except requests.RequestException as exc:
                last_error = exc
                logger.warning(
                    "Request for page {} failed (attempt {}/{}): {}",
                    page_number,
                    attempt,
                    attempts,
                    exc,
                )
                if attempt >= attempts:
                    break
                self._sleep(min(2 ** (attempt - 1), 8))

        raise FetchError(page_number, f"request failed: {last_error}") from last_error

    def fetch_page(self, page_number: int) -> List[Work]:
        """Fetch and parse one page, then wait for the configured interval."""
        logger.info("Processing page {}", page_number)
        html = self.fetch_html(page_number)
        works = search_page_to_works(html)
        if self.config.interval_seconds:
            self._sleep(self.config.interval_seconds)
        return works

    def close(self) -> None:
        self.session.close()
