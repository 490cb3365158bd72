"""Monthly work counts per tag."""

from __future__ import annotations

import datetime
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple


@dataclass
class TagTimeline:
    tag: str
    points: List[Tuple[datetime.date, int]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(count for _, count in self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "points": [{"month": month.isoformat(), "count": count} for month, count in self.points],
        }


def month_start(value: datetime.date) -> datetime.date:
    return value.replace(day=1)


def next_month(value: datetime.date) -> datetime.date:
    if value.month == 12:
        return datetime.date(value.year + 1, 1, 1)
    return datetime.date(value.year, value.month + 1, 1)


def parse_payload_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        return datetime.date.fromisoformat(value[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def monthly_counts(dates: Iterable[datetime.date]) -> List[Tuple[datetime.date, int]]:
    """Bucket dates by calendar month.

    Months without works between the first and last observed month are included
    with a zero count.
    """
    counts: Counter[datetime.date] = Counter(month_start(d) for d in dates)
    if not counts:
        return []

    points: List[Tuple[datetime.date, int]] = []
    month = min(counts)
    last = max(counts)
    while month <= last:
        points.append((month, counts.get(month, 0)))
        month = next_month(month)
    return points


def build_timeline(tag: str, payloads: Iterable[Dict[str, Any]]) -> TagTimeline:
    """Timeline for one tag from work payloads carrying a `date` field."""
    dates = [parse_payload_date(payload["date"]) for payload in payloads if payload.get("date")]
    return TagTimeline(tag=tag, points=monthly_counts(dates))
