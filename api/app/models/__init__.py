"""Pydantic models."""

from app.models.error import ErrorDetail
from app.models.project import Project, Source
from app.models.search import (
    Category,
    SearchRequest,
    SmartSearchRequest,
    SmartSearchResponse,
    SortMode,
    SourceFilter,
)

__all__ = [
    "Category",
    "ErrorDetail",
    "Project",
    "SearchRequest",
    "SmartSearchRequest",
    "SmartSearchResponse",
    "SortMode",
    "Source",
    "SourceFilter",
]
