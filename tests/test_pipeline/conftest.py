"""Shared fakes for pipeline tests."""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Sequence, Tuple

import pytest

from fandomvis.scrape.models import TagKind, Work
from fandomvis.utils.config import Config


class FakeWorksIndex:
    """In-memory stand-in for `WorksIndex`."""

    def __init__(self, works: Sequence[Work] = ()) -> None:
        self.works: Dict[str, Work] = {work.id: work for work in works}
        self.created = False
        self.upsert_calls: List[int] = []
        self.closed = False

    def create_collection(self, recreate: bool = False) -> None:
        self.created = True

    def upsert_works(self, works: Sequence[Work], batch_size: int | None = None) -> int:
        self.upsert_calls.append(len(works))
        for work in works:
            self.works[work.id] = work
        return len(works)

    def tag_frequencies(
        self,
        tag_kind: TagKind,
        *,
        min_works: int = 0,
        limit: int = 1000,
        query_filter: Any = None,
    ) -> List[Tuple[str, int]]:
        counts: Dict[str, int] = {}
        for work in self.works.values():
            for tag in set(work.tags(tag_kind)):
                counts[tag] = counts.get(tag, 0) + 1
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [(tag, count) for tag, count in ordered if count >= min_works][:limit]

    def scroll_payloads(self, fields, *, tag=None):
        for work in self.works.values():
            if tag is not None:
                tag_kind, value = tag
                if value not in work.tags(tag_kind):
                    continue
            payload = work.model_dump(mode="json")
            yield {name: payload[name] for name in fields}

    def close(self) -> None:
        self.closed = True


def _make_work(work_id: str, *, date: str = "2010-01-15", **kwargs) -> Work:
    return Work(
        id=work_id,
        title=f"Work {work_id}",
        date=datetime.date.fromisoformat(date),
        **kwargs,
    )


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        works_path=tmp_path / "works.jsonl",
        reports_path=tmp_path / "reports",
    )


@pytest.fixture
def make_work():
    """Factory for `Work` records with a title and date filled in."""
    return _make_work


@pytest.fixture
def fake_index():
    """Factory for in-memory works indexes."""
    return FakeWorksIndex
