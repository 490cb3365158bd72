"""Tests for monthly timelines."""

from __future__ import annotations

import datetime

import pytest

from fandomvis.analysis.ship_timeline import build_timeline, monthly_counts, next_month, parse_payload_date


def test_months_without_works_are_zero_filled() -> None:
    dates = [
        datetime.date(2019, 11, 30),
        datetime.date(2020, 2, 1),
        datetime.date(2020, 2, 29),
    ]

    assert monthly_counts(dates) == [
        (datetime.date(2019, 11, 1), 1),
        (datetime.date(2019, 12, 1), 0),
        (datetime.date(2020, 1, 1), 0),
        (datetime.date(2020, 2, 1), 2),
    ]


def test_no_dates() -> None:
    assert monthly_counts([]) == []


def test_next_month_rolls_year() -> None:
    assert next_month(datetime.date(2020, 12, 15)) == datetime.date(2021, 1, 1)


def test_parse_payload_date() -> None:
    assert parse_payload_date("2008-07-19") == datetime.date(2008, 7, 19)
    assert parse_payload_date(datetime.date(2008, 7, 19)) == datetime.date(2008, 7, 19)
    with pytest.raises(ValueError):
        parse_payload_date(20080719)


def test_build_timeline_ignores_missing_dates() -> None:
    timeline = build_timeline("Katara/Zuko", [{"date": "2008-07-19"}, {}, {"date": None}])

    assert timeline.points == [(datetime.date(2008, 7, 1), 1)]
    assert timeline.to_dict() == {
        "tag": "Katara/Zuko",
        "points": [{"month": "2008-07-01", "count": 1}],
    }
