"""Standalone HTML chord diagram for a co-occurrence matrix (d3 from CDN)."""

from __future__ import annotations

import html
import json
from dataclasses import dataclass, field
from typing import List, Sequence

D3_URL = "https://cdn.jsdelivr.net/npm/d3@7"


@dataclass
class ChordDiagram:
    matrix: Sequence[Sequence[float]]
    names: List[str]
    colors: List[str] = field(default_factory=list)
    title: str = "Ship Network"
    width: float = 1150.0
    margin: float = 75.0
    font_size_large: str = "14px"
    wrap_labels: bool = False

    def __post_init__(self) -> None:
        size = len(self.names)
        if len(self.matrix) != size or any(len(row) != size for row in self.matrix):
            raise ValueError(f"Chord matrix must be {size}x{size} to match names")
        if self.colors and len(self.colors) != size:
            raise ValueError("Chord colors must match names")

    def _data_json(self) -> str:
        data = {
            "matrix": [[float(value) for value in row] for row in self.matrix],
            "names": self.names,
            "colors": self.colors,
            "width": self.width,
            "margin": self.margin,
            "wrapLabels": self.wrap_labels,
        }
        # Keep "</script>" inside names from closing the script element.
        return json.dumps(data).replace("</", "<\\/")

    def to_html(self) -> str:
        title = html.escape(self.title)
        return "\n".join(
            [
                "<!DOCTYPE html>",
                "<html>",
                "<head>",
                "<meta charset='utf-8'>",
                f"<title>{title}</title>",
                "<style>",
                "body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; color: #333; margin: 0 auto; text-align: center; }",
                f".label {{ font-size: {self.font_size_large}; }}",
                ".chord { fill-opacity: 0.67; }",
                ".chord:hover { fill-opacity: 1; }",
                "</style>",
                f"<script src='{D3_URL}'></script>",
                "</head>",
                "<body>",
                f"<h1>{title}</h1>",
                "<div id='chart'></div>",
                "<script>",
                f"const data = {self._data_json()};",
                _CHORD_SCRIPT,
                "</script>",
                "</body>",
                "</html>",
            ]
        )


_CHORD_SCRIPT = """
const outerRadius = data.width / 2 - data.margin;
const innerRadius = outerRadius - 20;
const color = (i) => data.colors.length ? data.colors[i] : d3.schemeTableau10[i % 10];

const svg = d3.select("#chart").append("svg")
  .attr("width", data.width)
  .attr("height", data.width)
  .attr("viewBox", [-data.width / 2, -data.width / 2, data.width, data.width]);

const chords = d3.chord().padAngle(0.02).sortSubgroups(d3.descending)(data.matrix);
const arc = d3.arc().innerRadius(innerRadius).outerRadius(outerRadius);
const ribbon = d3.ribbon().radius(innerRadius);

const group = svg.append("g").selectAll("g").data(chords.groups).join("g");
group.append("path").attr("fill", (d) => color(d.index)).attr("d", arc);
group.append("title").text((d) => `${data.names[d.index]}: ${d.value}`);
group.append("text")
  .each((d) => { d.angle = (d.startAngle + d.endAngle) / 2; })
  .attr("class", "label")
  .attr("dy", "0.35em")
  .attr("transform", (d) => `rotate(${d.angle * 180 / Math.PI - 90}) translate(${outerRadius + 5})${d.angle > Math.PI ? " rotate(180)" : ""}`)
  .attr("text-anchor", (d) => d.angle > Math.PI ? "end" : null)
  .text((d) => {
    const name = data.names[d.index];
    return data.wrapLabels || name.length <= 24 ? name : name.slice(0, 23) + "…";
  });

svg.append("g").selectAll("path").data(chords).join("path")
  .attr("class", "chord")
  .attr("d", ribbon)
  .attr("fill", (d) => color(d.source.index))
  .append("title")
  .text((d) => `${data.names[d.source.index]} / ${data.names[d.target.index]}: ${d.source.value}`);
"""
