"""Tests for the paginated fetch pipeline."""

from __future__ import annotations

import io
import json

import pytest

from fandomvis.pipeline.fetch_pipeline import FetchPipeline
from fandomvis.scrape.fetcher import FetchError
from fandomvis.scrape.work_extractor import FieldParseError


class FakeFetcher:
    def __init__(self, pages: dict) -> None:
        self.pages = pages
        self.requested: list[int] = []

    def fetch_page(self, page_number: int):
        self.requested.append(page_number)
        page = self.pages.get(page_number, [])
        if isinstance(page, Exception):
            raise page
        return page


def _written_ids(output: io.StringIO) -> list[str]:
    return [json.loads(line)["id"] for line in output.getvalue().splitlines()]


def test_writes_pages_in_order(config, make_work) -> None:
    fetcher = FakeFetcher({1: [make_work("1"), make_work("2")], 2: [make_work("3")]})
    output = io.StringIO()

    result = FetchPipeline(config, fetcher=fetcher).run(output, start=1, count=2)

    assert _written_ids(output) == ["1", "2", "3"]
    assert result.pages_fetched == 2
    assert result.works_written == 3
    assert result.last_page == 2
    assert result.succeeded
    assert not result.exhausted


def test_stops_at_first_empty_page(config, make_work) -> None:
    fetcher = FakeFetcher({1: [make_work("1")], 2: [], 3: [make_work("3")]})
    output = io.StringIO()

    result = FetchPipeline(config, fetcher=fetcher).run(output, start=1, count=5)

    assert _written_ids(output) == ["1"]
    assert result.exhausted
    assert result.succeeded
    assert 3 not in fetcher.requested


def test_stops_at_failed_page_keeping_earlier_works(config, make_work) -> None:
    fetcher = FakeFetcher(
        {
            1: [make_work("1")],
            2: FieldParseError("Invalid count 'lots'", field="kudos", selector="dl.stats > dd.kudos"),
            3: [make_work("3")],
        }
    )
    output = io.StringIO()

    result = FetchPipeline(config, fetcher=fetcher).run(output, start=1, count=3)

    assert _written_ids(output) == ["1"]
    assert not result.succeeded
    assert "kudos" in result.error
    assert result.last_page == 1


def test_fetch_error_stops_run(config) -> None:
    fetcher = FakeFetcher({1: FetchError(1, "request failed")})
    output = io.StringIO()

    result = FetchPipeline(config, fetcher=fetcher).run(output, start=1, count=2)

    assert output.getvalue() == ""
    assert result.pages_fetched == 0
    assert "request failed" in result.error


def test_threaded_windows_keep_page_order(config, make_work) -> None:
    config.scrape.threads = 3
    pages = {number: [make_work(str(number))] for number in range(4, 11)}
    fetcher = FakeFetcher(pages)
    output = io.StringIO()

    result = FetchPipeline(config, fetcher=fetcher).run(output, start=4, count=7)

    assert _written_ids(output) == [str(number) for number in range(4, 11)]
    assert result.last_page == 10


def test_start_must_be_positive(config) -> None:
    with pytest.raises(ValueError):
        FetchPipeline(config, fetcher=FakeFetcher({})).run(io.StringIO(), start=0)
