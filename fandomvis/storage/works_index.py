"""Qdrant index of scraped works.

This module wraps the Qdrant client for storing `Work` records as payload-only
points and for the aggregate queries the reports need.

Collection:
    - works: one point per work, keyed by a UUID derived from the work id, so
      re-indexing the same work overwrites it

Features:
    - Collection creation with payload indexes for every tag field
    - Chunked bulk upsert
    - Terms aggregation over a tag field (Qdrant facets)
    - Filtered payload scrolling
    - Health checks
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from loguru import logger
from qdrant_client import QdrantClient
from qdrant_client.models import (
    FieldCondition,
    Filter,
    MatchValue,
    PayloadSchemaType,
    PointStruct,
)

from fandomvis.scrape.models import TagKind, Work
from fandomvis.utils.config import IndexConfig

KEYWORD_FIELDS = (
    "id",
    "author",
    TagKind.RELATIONSHIP.to_field(),
    TagKind.CHARACTER.to_field(),
    TagKind.FREEFORM.to_field(),
    "language",
)
INTEGER_FIELDS = ("words", "kudos", "hits")
SCROLL_PAGE_SIZE = 256


class QueryShapeError(RuntimeError):
    """An aggregation response did not have the expected shape."""


def work_point_id(work_id: str) -> str:
    """Stable point id for a work id (Qdrant ids must be UUIDs or integers)."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"work:{work_id}"))


def work_payload(work: Work) -> Dict[str, Any]:
    return work.model_dump(mode="json")


class WorksIndex:
    """Manager class for the works collection.

    Attributes:
        client: Qdrant client instance
        config: Index configuration
        collection: Name of the works collection
    """

    def __init__(self, config: IndexConfig, client: QdrantClient | None = None) -> None:
        """Initialize the index with configuration.

        Args:
            config: Index configuration with Qdrant connection details
            client: Pre-built client (used by tests); created from config if None

        Raises:
            ConnectionError: If unable to connect to Qdrant
        """
        self.config = config
        self.collection = config.works_collection

        if client is not None:
            self.client = client
            return

        try:
            if config.qdrant_location:
                self.client = QdrantClient(
                    location=config.qdrant_location,
                    api_key=config.qdrant_api_key or None,
                    timeout=30,
                )
                logger.info("Connected to Qdrant in local mode at {}", config.qdrant_location)
            else:
                kwargs: Dict[str, Any] = {
                    "host": config.qdrant_host,
                    "port": config.qdrant_port,
                    "https": config.qdrant_https,
                    "timeout": 30,
                }
                if config.qdrant_api_key:
                    kwargs["api_key"] = config.qdrant_api_key
                self.client = QdrantClient(**kwargs)
                logger.info("Connected to Qdrant at {}:{}", config.qdrant_host, config.qdrant_port)

            # Verify connection
            self.client.get_collections()

        except Exception as e:
            logger.error("Failed to connect to Qdrant: {}", e)
            raise ConnectionError(f"Unable to connect to Qdrant: {e}") from e

    def collection_exists(self) -> bool:
        collections = self.client.get_collections().collections
        return any(col.name == self.collection for col in collections)

    def create_collection(self, recreate: bool = False) -> None:
        """Create the works collection and its payload indexes.

        Points carry no vectors; every query is a payload filter or facet.

        Args:
            recreate: If True, delete an existing collection first
        """
        if recreate and self.collection_exists():
            self.client.delete_collection(self.collection)
            logger.info("Deleted existing collection: {}", self.collection)

        if self.collection_exists():
            logger.info("Collection {} already exists", self.collection)
            return

        self.client.create_collection(collection_name=self.collection, vectors_config={})

        for field_name in KEYWORD_FIELDS:
            self.client.create_payload_index(
                collection_name=self.collection,
                field_name=field_name,
                field_schema=PayloadSchemaType.KEYWORD,
            )
        for field_name in INTEGER_FIELDS:
            self.client.create_payload_index(
                collection_name=self.collection,
                field_name=field_name,
                field_schema=PayloadSchemaType.INTEGER,
            )

        logger.info("Created collection: {}", self.collection)

    def upsert_works(self, works: Sequence[Work], batch_size: int | None = None) -> int:
        """Upsert works in batches; existing points with the same work id are replaced.

        Returns:
            Number of works upserted
        """
        if not works:
            logger.warning("No works to upsert")
            return 0

        batch_size = batch_size or self.config.chunk_size
        total_upserted = 0
        for i in range(0, len(works), batch_size):
            batch = works[i : i + batch_size]
            points = [
                PointStruct(id=work_point_id(work.id), vector={}, payload=work_payload(work))
                for work in batch
            ]
            self.client.upsert(collection_name=self.collection, points=points, wait=True)
            total_upserted += len(points)

        logger.debug("Upserted {} works to {}", total_upserted, self.collection)
        return total_upserted

    def tag_frequencies(
        self,
        tag_kind: TagKind,
        *,
        min_works: int = 0,
        limit: int = 1000,
        query_filter: Filter | None = None,
    ) -> List[Tuple[str, int]]:
        """Count works per tag value of one tag kind.

        Returns:
            `(tag, count)` pairs, highest count first, keeping `count >= min_works`

        Raises:
            QueryShapeError: If the facet response is not a list of value/count hits
        """
        field_name = tag_kind.to_field()
        response = self.client.facet(
            collection_name=self.collection,
            key=field_name,
            facet_filter=query_filter,
            limit=limit,
            exact=True,
        )
        frequencies = parse_facet_hits(response, field_name)
        frequencies = [(tag, count) for tag, count in frequencies if count >= min_works]
        frequencies.sort(key=lambda item: (-item[1], item[0]))
        logger.info(
            "Loaded {} {} tags with at least {} works",
            len(frequencies),
            tag_kind.value,
            min_works,
        )
        return frequencies

    def scroll_payloads(
        self,
        fields: Sequence[str],
        *,
        tag: Tuple[TagKind, str] | None = None,
    ) -> Iterator[Dict[str, Any]]:
        """Yield selected payload fields of every work, optionally filtered by one tag."""
        scroll_filter = None
        if tag is not None:
            tag_kind, value = tag
            scroll_filter = Filter(
                must=[FieldCondition(key=tag_kind.to_field(), match=MatchValue(value=value))]
            )

        offset: Optional[Any] = None
        while True:
            points, offset = self.client.scroll(
                collection_name=self.collection,
                scroll_filter=scroll_filter,
                limit=SCROLL_PAGE_SIZE,
                offset=offset,
                with_payload=list(fields),
                with_vectors=False,
            )
            for point in points:
                yield dict(point.payload or {})
            if offset is None:
                break

    def count_works(self) -> int:
        return int(self.client.count(collection_name=self.collection, exact=True).count)

    def health_check(self) -> Tuple[bool, str]:
        """Check if Qdrant is reachable and the works collection exists.

        Returns:
            Tuple of (is_healthy, message)
        """
        try:
            if self.collection_exists():
                message = f"Qdrant is healthy. Collection {self.collection} exists."
                logger.info(message)
                return True, message
            message = f"Qdrant is accessible but missing collection: {self.collection}"
            logger.warning(message)
            return False, message
        except Exception as e:
            message = f"Qdrant health check failed: {e}"
            logger.error(message)
            return False, message

    def close(self) -> None:
        """Close the Qdrant client connection."""
        try:
            self.client.close()
            logger.debug("Closed Qdrant client connection")
        except Exception as e:
            logger.warning("Error closing Qdrant client: {}", e)

    def __enter__(self) -> "WorksIndex":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def parse_facet_hits(response: Any, field_name: str) -> List[Tuple[str, int]]:
    """Turn a facet response into `(value, count)` pairs, validating its shape."""
    hits = getattr(response, "hits", None)
    if not isinstance(hits, Iterable) or isinstance(hits, (str, bytes)):
        raise QueryShapeError(f"Facet response for {field_name!r} has no hits list")

    pairs: List[Tuple[str, int]] = []
    for position, hit in enumerate(hits):
        value = getattr(hit, "value", None)
        count = getattr(hit, "count", None)
        if not isinstance(value, str):
            raise QueryShapeError(
                f"Facet hit {position} for {field_name!r} has non-string value: {value!r}"
            )
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise QueryShapeError(
                f"Facet hit {position} for {field_name!r} has invalid count: {count!r}"
            )
        pairs.append((value, count))
    return pairs
