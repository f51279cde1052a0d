"""Exact tag filter (case-insensitive comparison)."""

from __future__ import annotations

from typing import Iterable, Optional

from app.models.project import Project


def parse_tags(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def filter_by_tags(projects: Iterable[Project], tags: Iterable[str]) -> list[Project]:
    """Keep projects sharing at least one tag with ``tags``. No tags -> unchanged."""
    items = list(projects)
    wanted = {t.strip().casefold() for t in tags if t and t.strip()}
    if not wanted:
        return items
    return [p for p in items if any(tag.casefold() in wanted for tag in p.tags)]
