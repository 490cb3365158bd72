"""Tests for co-occurrence matrix construction."""

from __future__ import annotations

import re

import numpy as np
import pytest
from loguru import logger

from fandomvis.ships.cooccurrence import (
    build_cooccurrence_matrix,
    golden_color,
    merge_ship_counts,
)
from fandomvis.ships.ship_parser import ShipKind


@pytest.fixture
def frequencies() -> list[tuple[str, int]]:
    return [
        ("Katara/Zuko", 120),
        ("Aang/Katara", 90),
        ("Sokka & Suki (Avatar)", 70),
        ("Suki/Sokka", 60),
        ("Mai/Zuko", 55),
        ("Azula/Mai/Ty Lee", 40),
        ("Original Characters", 12),
    ]


def test_matrix_is_symmetric_with_zero_diagonal(frequencies) -> None:
    result = build_cooccurrence_matrix(frequencies, ShipKind.ROMANTIC)

    assert np.array_equal(result.matrix, result.matrix.T)
    assert np.all(np.diag(result.matrix) == 0)


def test_matrix_names_are_sorted(frequencies) -> None:
    result = build_cooccurrence_matrix(frequencies, ShipKind.ROMANTIC)

    assert result.names == ["Aang", "Katara", "Mai", "Sokka", "Suki", "Zuko"]
    assert result.matrix.shape == (6, 6)
    assert result.weight("Zuko", "Katara") == 120
    assert result.weight("Katara", "Aang") == 90
    assert result.weight("Aang", "Zuko") == 0


def test_kind_filter(frequencies) -> None:
    result = build_cooccurrence_matrix(frequencies, ShipKind.PLATONIC)

    assert result.names == ["Sokka", "Suki"]
    assert result.weight("Sokka", "Suki") == 70


def test_duplicates_are_summed() -> None:
    result = build_cooccurrence_matrix([("Alice/Bob", 3), ("Bob/Alice", 5)], ShipKind.ROMANTIC)

    assert result.weight("Alice", "Bob") == 8
    assert result.weight("Bob", "Alice") == 8
    assert len(result.ship_counts) == 1
    assert result.ship_counts[0].count == 8


def test_unparseable_tags_are_skipped(frequencies) -> None:
    result = build_cooccurrence_matrix(frequencies, ShipKind.ROMANTIC)

    skipped = {item.tag: item for item in result.skipped}
    assert "Azula/Mai/Ty Lee" in skipped
    assert "Original Characters" in skipped
    assert "Sokka & Suki (Avatar)" in skipped
    assert skipped["Azula/Mai/Ty Lee"].count == 40
    assert "Ty Lee" not in result.names


def test_self_pairing_is_skipped() -> None:
    result = build_cooccurrence_matrix([("Zuko/Zuko", 4), ("Katara/Zuko", 2)], ShipKind.ROMANTIC)

    assert result.names == ["Katara", "Zuko"]
    assert result.weight("Zuko", "Zuko") == 0
    assert [item.reason for item in result.skipped] == ["character paired with itself"]


def test_merged_counts_are_sorted_by_count() -> None:
    ship_counts, skipped = merge_ship_counts(
        [("B/C", 5), ("A/B", 5), ("C/D", 9)],
        ShipKind.ROMANTIC,
    )

    assert skipped == []
    assert [item.ship.label() for item in ship_counts] == ["C/D", "A/B", "B/C"]


def test_negative_count_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        merge_ship_counts([("A/B", -1)], ShipKind.ROMANTIC)


def test_empty_input_gives_empty_matrix() -> None:
    result = build_cooccurrence_matrix([], ShipKind.ROMANTIC)

    assert result.names == []
    assert result.matrix.shape == (0, 0)
    assert len(result) == 0


def test_character_totals(frequencies) -> None:
    totals = build_cooccurrence_matrix(frequencies, ShipKind.ROMANTIC).character_totals()

    assert totals["Zuko"] == 175
    assert totals["Katara"] == 210


def test_golden_color_is_deterministic() -> None:
    assert golden_color(0) == golden_color(0)
    assert golden_color(0) != golden_color(1)
    assert re.fullmatch(r"#[0-9A-F]{6}", golden_color(7))


def test_golden_color_first_index_is_red_hue() -> None:
    # hue 0 with s=0.68, v=0.69 -> (176, 56, 56)
    assert golden_color(0) == "#B03838"


def test_matrix_colors_follow_index() -> None:
    result = build_cooccurrence_matrix([("A/B", 1), ("B/C", 1)], ShipKind.ROMANTIC)

    assert result.colors() == [golden_color(0), golden_color(1), golden_color(2)]


def test_kind_mismatch_is_logged() -> None:
    messages = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        build_cooccurrence_matrix([("Sokka & Suki", 7), ("Katara/Zuko", 2)], ShipKind.ROMANTIC)
    finally:
        logger.remove(handler_id)

    assert any("Sokka & Suki" in message for message in messages)
