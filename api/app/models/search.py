"""Search request/response models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.project import Project, Source


class SourceFilter(str, Enum):
    ALL = "All"
    GITHUB = "GitHub"
    HUGGING_FACE = "Hugging Face"
    NONE = "none"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SourceFilter":
        """Absent means All; anything unrecognized selects no source at all."""
        raw = (value or "").strip()
        if not raw:
            return cls.ALL
        for item in (cls.ALL, cls.GITHUB, cls.HUGGING_FACE):
            if raw.lower() == item.value.lower():
                return item
        return cls.NONE

    def sources(self) -> list[Source]:
        if self is SourceFilter.ALL:
            return [Source.GITHUB, Source.HUGGING_FACE]
        if self is SourceFilter.GITHUB:
            return [Source.GITHUB]
        if self is SourceFilter.HUGGING_FACE:
            return [Source.HUGGING_FACE]
        return []


class SortMode(str, Enum):
    DEFAULT = "default"
    GROWTH_WEEK = "growth_week"
    GROWTH_MONTH = "growth_month"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortMode":
        raw = (value or "").strip().lower()
        for item in cls:
            if raw == item.value:
                return item
        return cls.DEFAULT

    @property
    def lookback_days(self) -> Optional[int]:
        if self is SortMode.GROWTH_WEEK:
            return 7
        if self is SortMode.GROWTH_MONTH:
            return 30
        return None


class Category(str, Enum):
    HUMANOID = "humanoid"
    MOBILE = "mobile"
    ROBOTIC_ARM = "robotic_arm"
    LEGGED = "legged"
    DEXTEROUS_HAND = "dexterous_hand"
    DESKTOP = "desktop"
    PET = "pet"
    EDUCATIONAL = "educational"


class SearchRequest(BaseModel):
    """Parameters of one search. Built per request, never mutated."""

    model_config = ConfigDict(frozen=True)

    query: Optional[str] = None
    source: SourceFilter = SourceFilter.ALL
    tags: Tuple[str, ...] = ()
    sort: SortMode = SortMode.DEFAULT
    category: Optional[Category] = None

    @field_validator("query", mode="before")
    @classmethod
    def query_strip(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @classmethod
    def from_params(
        cls,
        *,
        query: Optional[str] = None,
        source: Optional[str] = None,
        tags: Optional[str] = None,
        sort: Optional[str] = None,
        category: Optional[str] = None,
    ) -> "SearchRequest":
        # Local import: category_filter owns the alias table.
        from app.services.category_filter import resolve_category
        from app.services.tag_filter import parse_tags

        return cls(
            query=query,
            source=SourceFilter.parse(source),
            tags=tuple(parse_tags(tags)),
            sort=SortMode.parse(sort),
            category=resolve_category(category),
        )


class SmartSearchRequest(BaseModel):
    """POST /api/smart-search body. Blank description is rejected with 400 by the router."""

    description: Optional[str] = None


class SmartSearchResponse(BaseModel):
    keywords: str
    results: List[Project] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
