"""Shared data models for scraped works."""

from __future__ import annotations

import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TagKind(str, Enum):
    """Free-text tag categories attached to a work."""

    RELATIONSHIP = "relationship"
    CHARACTER = "character"
    FREEFORM = "freeform"

    def to_field(self) -> str:
        """Return the Work/index field holding tags of this kind."""
        return _TAG_KIND_FIELDS[self]


_TAG_KIND_FIELDS = {
    TagKind.RELATIONSHIP: "relationships",
    TagKind.CHARACTER: "characters",
    TagKind.FREEFORM: "freeforms",
}


class Work(BaseModel):
    """Metadata for one work listing on a search results page."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    author: Optional[str] = None
    relationships: List[str] = Field(default_factory=list)
    characters: List[str] = Field(default_factory=list)
    freeforms: List[str] = Field(default_factory=list)
    date: datetime.date
    language: str = ""
    words: int = Field(default=0, ge=0)
    kudos: int = Field(default=0, ge=0)
    hits: int = Field(default=0, ge=0)

    def tags(self, kind: TagKind) -> List[str]:
        """Return the tag list for the given tag kind."""
        return getattr(self, kind.to_field())

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return self.model_dump_json()

    @classmethod
    def from_json_line(cls, line: str) -> "Work":
        return cls.model_validate_json(line)
