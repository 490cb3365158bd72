"""Character co-occurrence matrix built from ship tag frequencies."""

from __future__ import annotations

import colorsys
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import numpy as np
from loguru import logger

from fandomvis.ships.ship_parser import Ship, ShipKind, ShipParseError, parse_ship

GOLDEN_RATIO = 1.618033
DEFAULT_SATURATION = 0.68
DEFAULT_VALUE = 0.69


@dataclass(frozen=True)
class ShipCount:
    ship: Ship
    count: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "characters": list(self.ship.characters),
            "kind": self.ship.kind.value,
            "count": self.count,
        }


@dataclass(frozen=True)
class SkippedTag:
    """A raw tag left out of the matrix, with the reason."""

    tag: str
    count: int
    reason: str


@dataclass
class CoOccurrenceMatrix:
    """Symmetric character x character pairing frequencies.

    `names[i]` labels row and column `i` of `matrix`.
    """

    names: List[str]
    matrix: np.ndarray
    kind: ShipKind
    ship_counts: List[ShipCount] = field(default_factory=list)
    skipped: List[SkippedTag] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.names)

    def index_of(self, name: str) -> int:
        return self.names.index(name)

    def weight(self, first: str, second: str) -> float:
        return float(self.matrix[self.index_of(first), self.index_of(second)])

    def colors(
        self,
        *,
        saturation: float = DEFAULT_SATURATION,
        value: float = DEFAULT_VALUE,
    ) -> List[str]:
        return [golden_color(index, saturation=saturation, value=value) for index in range(len(self.names))]

    def character_totals(self) -> Dict[str, float]:
        """Sum of pairing counts per character."""
        totals = self.matrix.sum(axis=1)
        return {name: float(totals[index]) for index, name in enumerate(self.names)}

    def to_lists(self) -> List[List[float]]:
        return self.matrix.tolist()


def golden_color(
    index: int,
    *,
    saturation: float = DEFAULT_SATURATION,
    value: float = DEFAULT_VALUE,
) -> str:
    """Use the golden ratio to deal out differing colors for a large number of items.

    Hues stay evenly distributed across both small and large sets, and the color
    only depends on the index.
    """
    hue = ((index * 360) / GOLDEN_RATIO) % 360
    red, green, blue = colorsys.hsv_to_rgb(hue / 360, saturation, value)
    return "#{:02X}{:02X}{:02X}".format(
        round(red * 255), round(green * 255), round(blue * 255)
    )


def merge_ship_counts(
    frequencies: Iterable[Tuple[str, int]],
    kind: ShipKind,
) -> Tuple[List[ShipCount], List[SkippedTag]]:
    """Parse raw tags, keep ships of `kind` and sum counts of identical ships.

    Returns the merged counts (highest count first, ties in ship order) and the
    tags that were left out.
    """
    merged: Counter[Ship] = Counter()
    skipped: List[SkippedTag] = []
    raw_tags = 0

    for tag, count in frequencies:
        if count < 0:
            raise ValueError(f"Tag count cannot be negative: {tag!r} -> {count}")
        raw_tags += 1
        try:
            ship = parse_ship(tag)
        except ShipParseError as exc:
            logger.warning("Dropping ship: {}", exc)
            skipped.append(SkippedTag(tag=tag, count=count, reason=str(exc)))
            continue
        if ship.kind != kind:
            logger.warning("Dropping {} ship {!r}, expected {}", ship.kind.value, tag, kind.value)
            skipped.append(SkippedTag(tag=tag, count=count, reason=f"kind is {ship.kind.value}"))
            continue
        if ship.characters[0] == ship.characters[1]:
            logger.warning("Dropping ship pairing a character with itself: {!r}", tag)
            skipped.append(SkippedTag(tag=tag, count=count, reason="character paired with itself"))
            continue
        merged[ship] += count

    merged_away = raw_tags - len(skipped) - len(merged)
    if merged_away > 0:
        logger.warning("Merged {} duplicate ship tags", merged_away)

    ship_counts = [
        ShipCount(ship=ship, count=count)
        for ship, count in sorted(merged.items(), key=lambda item: (-item[1], item[0].sort_key))
    ]
    return ship_counts, skipped


def build_cooccurrence_matrix(
    frequencies: Iterable[Tuple[str, int]],
    kind: ShipKind,
) -> CoOccurrenceMatrix:
    """Build the symmetric co-occurrence matrix for ships of one kind."""
    ship_counts, skipped = merge_ship_counts(frequencies, kind)

    names = sorted({name for item in ship_counts for name in item.ship.characters})
    character_index = {name: index for index, name in enumerate(names)}

    matrix = np.zeros((len(names), len(names)), dtype=float)
    for item in ship_counts:
        first, second = item.ship.characters
        i = character_index[first]
        j = character_index[second]
        # Add rather than assign so duplicate ships accumulate.
        matrix[i, j] += item.count
        matrix[j, i] += item.count

    logger.info(
        "Built {} co-occurrence matrix: {} characters, {} ships, {} tags skipped",
        kind.value,
        len(names),
        len(ship_counts),
        len(skipped),
    )
    return CoOccurrenceMatrix(
        names=names,
        matrix=matrix,
        kind=kind,
        ship_counts=ship_counts,
        skipped=skipped,
    )
