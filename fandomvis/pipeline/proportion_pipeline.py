"""Monthly work counts for the most popular ships."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from loguru import logger

from fandomvis.analysis.ship_timeline import TagTimeline, build_timeline
from fandomvis.reporting.timeline_chart import write_timeline_html
from fandomvis.scrape.models import TagKind
from fandomvis.storage.works_index import WorksIndex
from fandomvis.utils.config import Config


class ProportionPipeline:
    """Chart the monthly count of works for the top relationship tags."""

    def __init__(self, config: Config, *, index: WorksIndex | None = None) -> None:
        self.config = config
        self.index = index or WorksIndex(config.index)

    def timelines(self, limit: int) -> List[TagTimeline]:
        top_tags = self.index.tag_frequencies(TagKind.RELATIONSHIP, limit=limit)
        timelines = []
        for tag, _count in top_tags:
            payloads = self.index.scroll_payloads(["date"], tag=(TagKind.RELATIONSHIP, tag))
            timelines.append(build_timeline(tag, payloads))
        return timelines

    def run(self, *, output_dir: str | Path, limit: int | None = None) -> Dict[str, str]:
        limit = limit or self.config.report.proportion_limit
        timelines = self.timelines(limit)

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        logger.info("Plotting chart")
        chart_path = write_timeline_html(timelines, output_dir / "proportion.html")
        data_path = output_dir / "proportion.json"
        data_path.write_text(
            json.dumps([timeline.to_dict() for timeline in timelines], indent=2),
            encoding="utf-8",
        )

        logger.info("Proportion chart written to {} ({} ships)", chart_path, len(timelines))
        return {"chart_html": str(chart_path), "data_json": str(data_path)}
