"""Ship tag parsing and co-occurrence aggregation."""

from fandomvis.ships.cooccurrence import (
    CoOccurrenceMatrix,
    ShipCount,
    SkippedTag,
    build_cooccurrence_matrix,
    golden_color,
    merge_ship_counts,
)
from fandomvis.ships.ship_parser import (
    Ship,
    ShipKind,
    ShipParseError,
    UnknownShipKind,
    UnsupportedArity,
    parse_ship,
    try_parse_ship,
)

__all__ = [
    "CoOccurrenceMatrix",
    "Ship",
    "ShipCount",
    "ShipKind",
    "ShipParseError",
    "SkippedTag",
    "UnknownShipKind",
    "UnsupportedArity",
    "build_cooccurrence_matrix",
    "golden_color",
    "merge_ship_counts",
    "parse_ship",
    "try_parse_ship",
]
