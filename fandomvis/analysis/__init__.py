"""Tag analytics over indexed works."""

from fandomvis.analysis.ship_timeline import TagTimeline, build_timeline, monthly_counts
from fandomvis.analysis.significant_tags import (
    SignificantTag,
    compute_significant_tags,
    jlh_score,
    significant_tags_markdown,
)

__all__ = [
    "SignificantTag",
    "TagTimeline",
    "build_timeline",
    "compute_significant_tags",
    "jlh_score",
    "monthly_counts",
    "significant_tags_markdown",
]
