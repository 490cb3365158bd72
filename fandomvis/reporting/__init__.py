"""Rendering of reports and charts."""

from fandomvis.reporting.chord import ChordDiagram
from fandomvis.reporting.timeline_chart import timeline_figure, write_timeline_html

__all__ = ["ChordDiagram", "timeline_figure", "write_timeline_html"]
