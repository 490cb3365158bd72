"""Search results page parsing into `Work` records.

Each `li.work` listing on an archive search page becomes one `Work`. Fields fall
into three policies:

- mandatory (id, title, date): a missing element, missing text or bad date
  format raises `StructuralExtractionError`;
- optional (author): absence yields `None`;
- soft-optional (language, words, kudos, hits): absence yields `""` / `0`, but a
  count that is present and unparseable raises `FieldParseError`.

The first failing listing aborts the whole page. Callers that want partial
results catch per page.
"""

from __future__ import annotations

import datetime
import re
from typing import List, Optional

import soupsieve as sv
from bs4 import BeautifulSoup, Tag
from loguru import logger

from fandomvis.scrape.models import Work

DATE_FORMAT = "%d %b %Y"
WORK_ID_PREFIX = "work_"
THOUSANDS_SEPARATORS = ","

_COUNT_PATTERN = re.compile(r"^\d+$")

# Compiled once per process; soupsieve patterns are immutable and thread-safe.
SELECTOR_WORK = sv.compile("li.work")
SELECTOR_TITLE_AUTHOR = sv.compile("h4.heading > a")
SELECTOR_RELATIONSHIP = sv.compile("li.relationships > a.tag")
SELECTOR_CHARACTER = sv.compile("li.characters > a.tag")
SELECTOR_FREEFORM = sv.compile("li.freeforms > a.tag")
SELECTOR_DATE = sv.compile("p.datetime")
SELECTOR_LANGUAGE = sv.compile("dl.stats > dd.language")
SELECTOR_WORDS = sv.compile("dl.stats > dd.words")
SELECTOR_KUDOS = sv.compile("dl.stats > dd.kudos")
SELECTOR_HITS = sv.compile("dl.stats > dd.hits")


class WorkExtractionError(ValueError):
    """A work listing could not be turned into a `Work`."""

    def __init__(
        self,
        message: str,
        *,
        field: str,
        selector: str | None = None,
        work_id: str | None = None,
    ) -> None:
        self.field = field
        self.selector = selector
        self.work_id = work_id
        context = [f"field={field}"]
        if selector:
            context.append(f"selector={selector!r}")
        if work_id:
            context.append(f"work_id={work_id}")
        super().__init__(f"{message} ({', '.join(context)})")


class StructuralExtractionError(WorkExtractionError):
    """A mandatory field (id, title, date) is missing or malformed."""


class FieldParseError(WorkExtractionError):
    """An optional field is present but cannot be parsed."""


class WorkElement:
    """Field lookups scoped to one `li.work` listing."""

    def __init__(self, element: Tag, work_id: str | None = None) -> None:
        self.element = element
        self.work_id = work_id

    def find_all(self, selector: sv.SoupSieve) -> List[Tag]:
        return selector.select(self.element)

    def find_first(self, selector: sv.SoupSieve) -> Optional[Tag]:
        return selector.select_one(self.element)

    @staticmethod
    def text_of(element: Tag | None) -> Optional[str]:
        """Return the stripped text of an element, or None if it has none."""
        if element is None:
            return None
        text = element.get_text(" ", strip=True)
        return text or None

    def required_text(self, field: str, selector: sv.SoupSieve, *, position: int = 0) -> str:
        matches = self.find_all(selector)
        if len(matches) <= position:
            raise StructuralExtractionError(
                "Work listing is missing a mandatory element",
                field=field,
                selector=selector.pattern,
                work_id=self.work_id,
            )
        text = self.text_of(matches[position])
        if text is None:
            raise StructuralExtractionError(
                "Mandatory element has no text",
                field=field,
                selector=selector.pattern,
                work_id=self.work_id,
            )
        return text

    def optional_text(self, selector: sv.SoupSieve, *, position: int = 0) -> Optional[str]:
        matches = self.find_all(selector)
        if len(matches) <= position:
            return None
        return self.text_of(matches[position])

    def tag_texts(self, field: str, selector: sv.SoupSieve) -> List[str]:
        texts: List[str] = []
        for element in self.find_all(selector):
            text = self.text_of(element)
            if text is None:
                raise FieldParseError(
                    "Tag element has no text",
                    field=field,
                    selector=selector.pattern,
                    work_id=self.work_id,
                )
            texts.append(text)
        return texts

    def optional_count(self, field: str, selector: sv.SoupSieve) -> int:
        element = self.find_first(selector)
        if element is None:
            return 0
        text = self.text_of(element)
        if text is None:
            return 0
        cleaned = text
        for separator in THOUSANDS_SEPARATORS:
            cleaned = cleaned.replace(separator, "")
        if not _COUNT_PATTERN.match(cleaned):
            raise FieldParseError(
                f"Invalid count {text!r}",
                field=field,
                selector=selector.pattern,
                work_id=self.work_id,
            )
        return int(cleaned)


class SearchPageParser:
    """Parse search results pages into `Work` records, preserving page order."""

    def parse(self, body: str) -> List[Work]:
        soup = BeautifulSoup(body, "html.parser")
        works = [self.parse_work(element) for element in SELECTOR_WORK.select(soup)]
        logger.debug("Parsed {} works from search page", len(works))
        return works

    def parse_work(self, element: Tag) -> Work:
        work_id = self._work_id(element)
        listing = WorkElement(element, work_id)

        title = listing.required_text("title", SELECTOR_TITLE_AUTHOR, position=0)
        author = listing.optional_text(SELECTOR_TITLE_AUTHOR, position=1)

        relationships = listing.tag_texts("relationships", SELECTOR_RELATIONSHIP)
        characters = listing.tag_texts("characters", SELECTOR_CHARACTER)
        freeforms = listing.tag_texts("freeforms", SELECTOR_FREEFORM)

        date_text = listing.required_text("date", SELECTOR_DATE)
        try:
            posted = datetime.datetime.strptime(date_text, DATE_FORMAT).date()
        except ValueError as exc:
            raise StructuralExtractionError(
                f"Unexpected date format {date_text!r}, expected {DATE_FORMAT!r}",
                field="date",
                selector=SELECTOR_DATE.pattern,
                work_id=work_id,
            ) from exc

        return Work(
            id=work_id,
            title=title,
            author=author,
            relationships=relationships,
            characters=characters,
            freeforms=freeforms,
            date=posted,
            language=listing.optional_text(SELECTOR_LANGUAGE) or "",
            words=listing.optional_count("words", SELECTOR_WORDS),
            kudos=listing.optional_count("kudos", SELECTOR_KUDOS),
            hits=listing.optional_count("hits", SELECTOR_HITS),
        )

    def _work_id(self, element: Tag) -> str:
        raw_id = element.get("id")
        if not isinstance(raw_id, str) or not raw_id:
            raise StructuralExtractionError(
                "Work listing has no id attribute",
                field="id",
                selector=SELECTOR_WORK.pattern,
            )
        if not raw_id.startswith(WORK_ID_PREFIX) or len(raw_id) == len(WORK_ID_PREFIX):
            raise StructuralExtractionError(
                f"Work id {raw_id!r} does not have the {WORK_ID_PREFIX!r} prefix",
                field="id",
                selector=SELECTOR_WORK.pattern,
            )
        return raw_id[len(WORK_ID_PREFIX) :]


def search_page_to_works(body: str) -> List[Work]:
    """Parse one search results page; an empty list means no more results."""
    return SearchPageParser().parse(body)
