"""Search index storage."""

from fandomvis.storage.works_index import QueryShapeError, WorksIndex, work_point_id

__all__ = ["QueryShapeError", "WorksIndex", "work_point_id"]
