"""Significant tags report for the most popular ships."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from loguru import logger

from fandomvis.analysis.significant_tags import (
    RELATIONSHIPS_FIELD,
    SignificantTag,
    compute_significant_tags,
    significant_tags_markdown,
)
from fandomvis.scrape.models import TagKind
from fandomvis.storage.works_index import WorksIndex
from fandomvis.utils.config import Config


class SignificantTagsPipeline:
    """Find tags over-represented in the works of each top ship."""

    def __init__(self, config: Config, *, index: WorksIndex | None = None) -> None:
        self.config = config
        self.index = index or WorksIndex(config.index)

    def compute(
        self,
        tag_kind: TagKind,
        *,
        ship_limit: int,
        tag_limit: int,
        min_count: int = 3,
    ) -> Dict[str, List[SignificantTag]]:
        ships = [tag for tag, _ in self.index.tag_frequencies(TagKind.RELATIONSHIP, limit=ship_limit)]
        fields = sorted({RELATIONSHIPS_FIELD, tag_kind.to_field()})
        return compute_significant_tags(
            self.index.scroll_payloads(fields),
            ships,
            tag_kind,
            limit=tag_limit,
            min_count=min_count,
        )

    def run(
        self,
        *,
        tag_kind: TagKind = TagKind.RELATIONSHIP,
        output_path: str | Path | None = None,
        ship_limit: int | None = None,
        tag_limit: int | None = None,
    ) -> str:
        results = self.compute(
            tag_kind,
            ship_limit=ship_limit or self.config.report.significant_ship_limit,
            tag_limit=tag_limit or self.config.report.significant_tag_limit,
        )
        markdown = significant_tags_markdown(results)

        if output_path is not None:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(markdown, encoding="utf-8")
            logger.info("Significant tags report written to {}", output_path)
        return markdown
