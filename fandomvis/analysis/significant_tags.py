"""Tags that are over-represented among works carrying a given ship.

Scoring follows the JLH heuristic used by search engines for significant terms:

    score = (fg% - bg%) * (fg% / bg%)

where fg% is the share of the ship's works carrying the tag and bg% the share of
all works carrying it. Tags at or below their background share are not
significant.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from fandomvis.scrape.models import TagKind

RELATIONSHIPS_FIELD = TagKind.RELATIONSHIP.to_field()


@dataclass(frozen=True)
class SignificantTag:
    tag: str
    score: float
    foreground_count: int
    background_count: int


def jlh_score(
    foreground_count: int,
    foreground_total: int,
    background_count: int,
    background_total: int,
) -> float:
    if foreground_total <= 0 or background_total <= 0 or background_count <= 0:
        return 0.0
    foreground_pct = foreground_count / foreground_total
    background_pct = background_count / background_total
    if foreground_pct <= background_pct:
        return 0.0
    return (foreground_pct - background_pct) * (foreground_pct / background_pct)


def _unique_tags(payload: Mapping[str, Any], field_name: str) -> set[str]:
    return {tag for tag in payload.get(field_name) or [] if tag}


def compute_significant_tags(
    payloads: Iterable[Mapping[str, Any]],
    ships: Sequence[str],
    tag_kind: TagKind,
    *,
    limit: int = 10,
    min_count: int = 3,
) -> Dict[str, List[SignificantTag]]:
    """Significant tags of `tag_kind` for each ship tag in `ships`.

    Args:
        payloads: Work payloads with `relationships` and the tag kind's field
        ships: Relationship tags to analyse, in report order
        tag_kind: Which tag field to score
        limit: Maximum tags per ship
        min_count: Minimum works carrying both the ship and the tag

    Returns:
        Mapping of ship tag to its significant tags, best first
    """
    field_name = tag_kind.to_field()
    wanted = set(ships)

    background: Counter[str] = Counter()
    foreground: Dict[str, Counter[str]] = {ship: Counter() for ship in ships}
    foreground_totals: Counter[str] = Counter()
    background_total = 0

    for payload in payloads:
        background_total += 1
        tags = _unique_tags(payload, field_name)
        background.update(tags)
        for ship in _unique_tags(payload, RELATIONSHIPS_FIELD) & wanted:
            foreground_totals[ship] += 1
            foreground[ship].update(tags)

    results: Dict[str, List[SignificantTag]] = {}
    for ship in ships:
        scored: List[SignificantTag] = []
        for tag, count in foreground[ship].items():
            if tag == ship or count < min_count:
                continue
            score = jlh_score(count, foreground_totals[ship], background[tag], background_total)
            if score <= 0:
                continue
            scored.append(
                SignificantTag(
                    tag=tag,
                    score=score,
                    foreground_count=count,
                    background_count=background[tag],
                )
            )
        scored.sort(key=lambda item: (-item.score, item.tag))
        results[ship] = scored[:limit]

    return results


def significant_tags_markdown(results: Mapping[str, Sequence[SignificantTag]]) -> str:
    lines = ["# Significant tags", ""]
    for ship, tags in results.items():
        lines.append(f"## {ship}")
        lines.append("")
        for tag in tags:
            lines.append(f"- {tag.tag}")
        lines.append("")
    return "\n".join(lines)
