"""Final ordering by popularity."""

from __future__ import annotations

from typing import Iterable

from app.models.project import Project


def rank(projects: Iterable[Project]) -> list[Project]:
    # sorted() is stable with reverse=True, so ties keep merge order.
    return sorted(projects, key=lambda p: p.popularity_score, reverse=True)
