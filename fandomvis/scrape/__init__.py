"""Search page scraping package exports."""

from fandomvis.scrape.fetcher import ENDPOINT_AO3, FetchError, SearchPageFetcher, page_url
from fandomvis.scrape.models import TagKind, Work
from fandomvis.scrape.work_extractor import (
    FieldParseError,
    SearchPageParser,
    StructuralExtractionError,
    WorkExtractionError,
    search_page_to_works,
)

__all__ = [
    "ENDPOINT_AO3",
    "FetchError",
    "FieldParseError",
    "SearchPageFetcher",
    "SearchPageParser",
    "StructuralExtractionError",
    "TagKind",
    "Work",
    "WorkExtractionError",
    "page_url",
    "search_page_to_works",
]
