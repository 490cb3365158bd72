"""Ship network report pipeline.

Queries relationship tag frequencies from the works index, folds them into a
character co-occurrence matrix and writes the report:
- chord diagram HTML (golden-ratio colors per character)
- merged ship counts as JSON
- matrix as CSV
- GraphViz DOT network
- Markdown summary
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from fandomvis.reporting.chord import ChordDiagram
from fandomvis.scrape.models import TagKind
from fandomvis.ships.cooccurrence import CoOccurrenceMatrix, build_cooccurrence_matrix
from fandomvis.ships.ship_parser import ShipKind
from fandomvis.storage.works_index import WorksIndex
from fandomvis.utils.config import Config


class ShipNetworkReport(BaseModel):
    """Serialized ship network report."""

    model_config = ConfigDict(extra="ignore")

    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    parameters: Dict[str, Any] = Field(default_factory=dict)
    totals: Dict[str, int] = Field(default_factory=dict)
    top_ships: List[Dict[str, Any]] = Field(default_factory=list)
    top_characters: List[Dict[str, Any]] = Field(default_factory=list)
    skipped_tags: List[Dict[str, Any]] = Field(default_factory=list)
    artifacts: Dict[str, str] = Field(default_factory=dict)

    def to_markdown(self) -> str:
        lines: list[str] = []
        lines.append("# Ship Network Report")
        lines.append("")
        lines.append(f"Generated at: `{self.generated_at.isoformat()}`")
        if self.parameters:
            lines.append("")
            lines.append("## Parameters")
            lines.append("")
            for key in sorted(self.parameters):
                lines.append(f"- `{key}`: `{self.parameters[key]}`")
        lines.append("")
        lines.append("## Totals")
        lines.append("")
        for key in sorted(self.totals):
            lines.append(f"- **{key}**: {self.totals[key]}")

        if self.top_ships:
            lines.append("")
            lines.append("## Top Ships")
            lines.append("")
            max_count = max((row["count"] for row in self.top_ships), default=0)
            for row in self.top_ships[:25]:
                bar = self._ascii_bar(row["count"], max_count)
                lines.append(f"- `{row['label']}`: {row['count']} {bar}")

        if self.top_characters:
            lines.append("")
            lines.append("## Top Characters")
            lines.append("")
            for row in self.top_characters[:25]:
                lines.append(f"- `{row['name']}`: {row['total']:g}")

        if self.skipped_tags:
            lines.append("")
            lines.append("## Skipped Tags")
            lines.append("")
            for row in self.skipped_tags[:50]:
                lines.append(f"- `{row['tag']}` ({row['count']}): {row['reason']}")

        if self.artifacts:
            lines.append("")
            lines.append("## Artifacts")
            lines.append("")
            for key in sorted(self.artifacts):
                lines.append(f"- `{key}`: `{self.artifacts[key]}`")
        lines.append("")
        return "\n".join(lines)

    def _ascii_bar(self, value: int, max_value: int, width: int = 20) -> str:
        if max_value <= 0:
            return ""
        filled = int((value / max_value) * width)
        return "[" + "█" * filled + " " * (width - filled) + "]"


@dataclass(frozen=True)
class ShipNetworkParameters:
    min_works: int = 50
    limit: int = 1000
    ship_kind: ShipKind = ShipKind.ROMANTIC


def write_cooccurrence_csv(cooccurrence: CoOccurrenceMatrix, output_path: Path) -> Path:
    """Write the full matrix to CSV, one row per character."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Character"] + cooccurrence.names)
        for name, row in zip(cooccurrence.names, cooccurrence.to_lists()):
            writer.writerow([name] + [f"{value:g}" for value in row])
    return output_path


def write_graphviz_dot(
    cooccurrence: CoOccurrenceMatrix,
    output_path: Path,
    *,
    max_nodes: int = 75,
) -> Path:
    totals = cooccurrence.character_totals()
    keep = set(sorted(totals, key=lambda name: (-totals[name], name))[:max_nodes])
    colors = dict(zip(cooccurrence.names, cooccurrence.colors()))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = ["graph ships {"]
    lines.append("  graph [overlap=false, splines=true];")
    for name in cooccurrence.names:
        if name not in keep:
            continue
        label = name.replace('"', '\\"')
        lines.append(f'  "{label}" [color="{colors[name]}"];')

    for item in cooccurrence.ship_counts:
        first, second = item.ship.characters
        if first not in keep or second not in keep:
            continue
        penwidth = max(1.0, min(8.0, item.count / 10))
        left = first.replace('"', '\\"')
        right = second.replace('"', '\\"')
        lines.append(f'  "{left}" -- "{right}" [label="{item.count}", penwidth={penwidth:.2f}];')
    lines.append("}")
    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return output_path


class ShipNetworkPipeline:
    """Build the character network for one ship kind and write its artifacts."""

    def __init__(self, config: Config, *, index: WorksIndex | None = None) -> None:
        self.config = config
        self.index = index or WorksIndex(config.index)

    def build(self, parameters: ShipNetworkParameters) -> CoOccurrenceMatrix:
        frequencies = self.index.tag_frequencies(
            TagKind.RELATIONSHIP,
            min_works=parameters.min_works,
            limit=parameters.limit,
        )
        return build_cooccurrence_matrix(frequencies, parameters.ship_kind)

    def run(
        self,
        *,
        output_dir: str | Path,
        parameters: ShipNetworkParameters | None = None,
    ) -> ShipNetworkReport:
        params = parameters or ShipNetworkParameters()
        cooccurrence = self.build(params)
        report_config = self.config.report

        totals = cooccurrence.character_totals()
        report = ShipNetworkReport(
            parameters={
                "min_works": params.min_works,
                "limit": params.limit,
                "ship_kind": params.ship_kind.value,
            },
            totals={
                "characters": len(cooccurrence.names),
                "ships": len(cooccurrence.ship_counts),
                "skipped_tags": len(cooccurrence.skipped),
                "works_counted": sum(item.count for item in cooccurrence.ship_counts),
            },
            top_ships=[
                {"label": item.ship.label(), "count": item.count}
                for item in cooccurrence.ship_counts[:50]
            ],
            top_characters=[
                {"name": name, "total": totals[name]}
                for name in sorted(totals, key=lambda name: (-totals[name], name))[:50]
            ],
            skipped_tags=[
                {"tag": item.tag, "count": item.count, "reason": item.reason}
                for item in cooccurrence.skipped
            ],
        )

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        colors = cooccurrence.colors(
            saturation=report_config.saturation,
            value=report_config.value,
        )
        chord = ChordDiagram(
            matrix=cooccurrence.to_lists(),
            names=cooccurrence.names,
            colors=colors,
            title=f"{params.ship_kind.value.capitalize()} Ship Network",
            width=report_config.width,
            margin=report_config.margin,
            font_size_large=report_config.font_size_large,
            wrap_labels=report_config.wrap_labels,
        )
        html_path = output_dir / "ship_network.html"
        html_path.write_text(chord.to_html(), encoding="utf-8")

        counts_path = output_dir / "ship_counts.json"
        counts_path.write_text(
            json.dumps([item.to_dict() for item in cooccurrence.ship_counts], indent=2),
            encoding="utf-8",
        )

        report.artifacts = {
            "chord_html": str(html_path),
            "ship_counts": str(counts_path),
            "cooccurrence_matrix": str(
                write_cooccurrence_csv(cooccurrence, output_dir / "cooccurrence_matrix.csv")
            ),
            "network_dot": str(write_graphviz_dot(cooccurrence, output_dir / "ship_network.dot")),
        }

        markdown_path = output_dir / "ship_network.md"
        report.artifacts["report_markdown"] = str(markdown_path)
        markdown_path.write_text(report.to_markdown(), encoding="utf-8")

        logger.info(
            "Ship network report written to {} ({} characters, {} ships)",
            output_dir,
            len(cooccurrence.names),
            len(cooccurrence.ship_counts),
        )
        return report
