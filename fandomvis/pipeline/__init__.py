"""Pipeline orchestrators for end-to-end workflows."""

from fandomvis.pipeline.fetch_pipeline import FetchPipeline, FetchResult
from fandomvis.pipeline.index_pipeline import IndexPipeline
from fandomvis.pipeline.proportion_pipeline import ProportionPipeline
from fandomvis.pipeline.ship_network_pipeline import (
    ShipNetworkParameters,
    ShipNetworkPipeline,
    ShipNetworkReport,
)
from fandomvis.pipeline.significant_tags_pipeline import SignificantTagsPipeline

__all__ = [
    "FetchPipeline",
    "FetchResult",
    "IndexPipeline",
    "ProportionPipeline",
    "ShipNetworkParameters",
    "ShipNetworkPipeline",
    "ShipNetworkReport",
    "SignificantTagsPipeline",
]
