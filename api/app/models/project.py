"""Unified project record shared by every upstream source."""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Source(str, Enum):
    GITHUB = "GitHub"
    HUGGING_FACE = "Hugging Face"


class Project(BaseModel):
    """One repository or model, normalized from any source.

    ``popularity_score`` is stars for GitHub and downloads for Hugging Face.
    Serialized with camelCase keys (``popularityScore``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    description: str = ""
    url: str
    source: Source
    tags: List[str] = Field(default_factory=list)
    popularity_score: int = Field(default=0, ge=0)

    @field_validator("tags", mode="before")
    @classmethod
    def tags_never_none(cls, v: object) -> object:
        if v is None:
            return []
        return v

    @property
    def key(self) -> tuple[str, Source]:
        """Identity used for deduplication."""
        return (self.id, self.source)
