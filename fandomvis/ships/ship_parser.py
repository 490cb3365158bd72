"""Relationship ("ship") tag parsing.

A ship tag names two characters joined by `/` (romantic) or `&` (platonic),
optionally with a fandom qualifier in parentheses:

    "Katara/Zuko"
    "Sokka & Suki (Avatar)"

Parsed ships are canonical: the character pair is sorted, so tags that differ
only by character order, whitespace or fandom suffix compare equal.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict

FANDOM_QUALIFIER_START = "("


class ShipKind(str, Enum):
    """Relationship kind, determined by the separator used in the tag."""

    ROMANTIC = "romantic"
    PLATONIC = "platonic"

    @property
    def delimiter(self) -> str:
        return _DELIMITERS[self]


_DELIMITERS = {
    ShipKind.ROMANTIC: "/",
    ShipKind.PLATONIC: "&",
}

# Checked in order; "/" wins for tags that contain both.
_KIND_PRECEDENCE = (ShipKind.ROMANTIC, ShipKind.PLATONIC)


class ShipParseError(ValueError):
    """A relationship tag could not be turned into a pairwise `Ship`."""

    def __init__(self, tag: str, message: str) -> None:
        self.tag = tag
        super().__init__(f"{message}: {tag!r}")


class UnknownShipKind(ShipParseError):
    """The tag contains neither `/` nor `&`."""

    def __init__(self, tag: str) -> None:
        super().__init__(tag, "Unknown ship kind")


class UnsupportedArity(ShipParseError):
    """The tag does not name exactly two characters."""

    def __init__(self, tag: str, characters: List[str]) -> None:
        self.characters = characters
        super().__init__(tag, f"Ship must have exactly two characters, found {len(characters)}")


class Ship(BaseModel):
    """Canonical character pair plus relationship kind."""

    model_config = ConfigDict(frozen=True)

    characters: Tuple[str, str]
    kind: ShipKind

    @property
    def sort_key(self) -> Tuple[str, str, str]:
        return (self.characters[0], self.characters[1], self.kind.value)

    def __lt__(self, other: "Ship") -> bool:
        if not isinstance(other, Ship):
            return NotImplemented
        return self.sort_key < other.sort_key

    def label(self) -> str:
        """Display form, e.g. `Katara/Zuko`."""
        return self.kind.delimiter.join(self.characters)


def ship_kind_of(tag: str) -> ShipKind:
    for kind in _KIND_PRECEDENCE:
        if kind.delimiter in tag:
            return kind
    raise UnknownShipKind(tag)


def _character_name(candidate: str) -> str:
    fandom_start = candidate.find(FANDOM_QUALIFIER_START)
    if fandom_start != -1:
        candidate = candidate[:fandom_start]
    return candidate.strip()


def parse_ship(tag: str) -> Ship:
    """Parse a raw relationship tag.

    Raises:
        UnknownShipKind: If the tag has no `/` or `&` separator
        UnsupportedArity: If the tag does not name exactly two characters
    """
    kind = ship_kind_of(tag)

    characters = [_character_name(part) for part in tag.split(kind.delimiter)]
    characters = [name for name in characters if name]
    if len(characters) != 2:
        raise UnsupportedArity(tag, characters)

    first, second = sorted(characters)
    return Ship(characters=(first, second), kind=kind)


def try_parse_ship(tag: str) -> Optional[Ship]:
    """Parse a tag, logging and returning None for unsupported tags."""
    try:
        return parse_ship(tag)
    except ShipParseError as exc:
        logger.warning("Dropping ship: {}", exc)
        return None
