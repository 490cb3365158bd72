"""Tests for search page parsing."""

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from fandomvis.scrape.work_extractor import (
    FieldParseError,
    StructuralExtractionError,
    WorkExtractionError,
    search_page_to_works,
)

FIXTURE_PATH = Path(__file__).parent.parent / "fixtures" / "search_page.html"


@pytest.fixture
def search_page() -> str:
    return FIXTURE_PATH.read_text(encoding="utf-8")


def _page(*listings: str) -> str:
    return "<html><body><ol>" + "".join(listings) + "</ol></body></html>"


def _listing(
    *,
    work_id: str | None = "work_7",
    heading: str = "<a href='/works/7'>Title</a> by <a href='/users/a'>someone</a>",
    date: str | None = "05 Jan 2010",
    stats: str = "",
) -> str:
    id_attr = f" id='{work_id}'" if work_id is not None else ""
    date_html = f"<p class='datetime'>{date}</p>" if date is not None else ""
    return (
        f"<li{id_attr} class='work blurb'>"
        f"<h4 class='heading'>{heading}</h4>"
        f"{date_html}"
        f"<dl class='stats'>{stats}</dl>"
        "</li>"
    )


def test_parses_fixture_page_in_order(search_page: str) -> None:
    works = search_page_to_works(search_page)

    assert [work.id for work in works] == ["1001", "1002", "1003"]


def test_full_listing_fields(search_page: str) -> None:
    work = search_page_to_works(search_page)[0]

    assert work.title == "Tea and Sympathy"
    assert work.author == "irohfan"
    assert work.relationships == ["Katara/Zuko", "Sokka & Suki (Avatar)"]
    assert work.characters == ["Katara (Avatar)", "Zuko (Avatar)"]
    assert work.freeforms == ["Fluff", "Tea"]
    assert work.date == datetime.date(2006, 2, 14)
    assert work.language == "English"
    assert work.words == 12345
    assert work.kudos == 1234
    assert work.hits == 56789


def test_missing_author_and_kudos(search_page: str) -> None:
    work = search_page_to_works(search_page)[1]

    assert work.author is None
    assert work.kudos == 0
    assert work.hits == 42


def test_missing_tags_and_language(search_page: str) -> None:
    work = search_page_to_works(search_page)[2]

    assert work.relationships == []
    assert work.characters == []
    assert work.freeforms == []
    assert work.language == ""
    assert work.words == 3000
    assert work.hits == 0


def test_empty_page_returns_no_works() -> None:
    assert search_page_to_works("<html><body><p>No results found.</p></body></html>") == []


def test_missing_id_is_structural_error() -> None:
    with pytest.raises(StructuralExtractionError) as exc_info:
        search_page_to_works(_page(_listing(work_id=None)))

    assert exc_info.value.field == "id"


def test_id_without_prefix_is_structural_error() -> None:
    with pytest.raises(StructuralExtractionError) as exc_info:
        search_page_to_works(_page(_listing(work_id="bookmark_7")))

    assert exc_info.value.field == "id"


def test_missing_title_is_structural_error() -> None:
    with pytest.raises(StructuralExtractionError) as exc_info:
        search_page_to_works(_page(_listing(heading="")))

    assert exc_info.value.field == "title"
    assert exc_info.value.work_id == "7"


def test_missing_date_is_structural_error() -> None:
    with pytest.raises(StructuralExtractionError) as exc_info:
        search_page_to_works(_page(_listing(date=None)))

    assert exc_info.value.field == "date"


def test_bad_date_format_is_structural_error() -> None:
    with pytest.raises(StructuralExtractionError) as exc_info:
        search_page_to_works(_page(_listing(date="2010-01-05")))

    assert exc_info.value.field == "date"
    assert exc_info.value.selector == "p.datetime"


def test_malformed_count_is_field_parse_error() -> None:
    stats = "<dd class='kudos'>lots</dd>"

    with pytest.raises(FieldParseError) as exc_info:
        search_page_to_works(_page(_listing(stats=stats)))

    assert exc_info.value.field == "kudos"
    assert "lots" in str(exc_info.value)


def test_one_bad_listing_fails_the_page() -> None:
    page = _page(_listing(work_id="work_1"), _listing(work_id="work_2", date="yesterday"))

    with pytest.raises(WorkExtractionError):
        search_page_to_works(page)


def test_counts_outside_stats_are_ignored() -> None:
    page = _page(
        _listing(stats="<dd class='hits'>10</dd>")
        .replace("</li>", "<dd class='kudos'>not-a-number</dd></li>")
    )

    work = search_page_to_works(page)[0]

    assert work.hits == 10
    assert work.kudos == 0


def test_tag_without_text_is_field_parse_error() -> None:
    listing = _listing().replace(
        "</li>", "<ul><li class='relationships'><a class='tag'> </a></li></ul></li>"
    )

    with pytest.raises(FieldParseError) as exc_info:
        search_page_to_works(_page(listing))

    assert exc_info.value.field == "relationships"


def test_nested_title_markup_keeps_word_breaks() -> None:
    heading = "<a href='/works/7'>Tea <em>and</em> Sympathy</a>"

    work = search_page_to_works(_page(_listing(heading=heading)))[0]

    assert work.title == "Tea and Sympathy"
    assert work.author is None
