"""Fuzzy relevance filter over name, tags and description.

Scores come from rapidfuzz (0-100). A query is split on commas into terms and
each term into word tokens. A token is scored against each word of a field: a
token contained in a word ("manipul" in "manipulation") scores 100, anything
else gets plain ``ratio``. Words are never matched as fragments of the token,
so a short tag like "ai" cannot match "gait", and "gait" does not reach the
threshold against "navigation".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from app.models.project import Project
from app.services import search_config

log = logging.getLogger(__name__)

FIELD_WEIGHTS = {"name": 1.0, "tags": 0.9, "description": 0.8}


@dataclass(frozen=True)
class RelevanceScore:
    raw: float
    weighted: float


def query_terms(query: Optional[str]) -> list[list[str]]:
    """'humanoid robot, gait' -> [['humanoid', 'robot'], ['gait']]"""
    terms: list[list[str]] = []
    for chunk in (query or "").split(","):
        tokens = default_process(chunk).split()
        if tokens:
            terms.append(tokens)
    return terms


def _token_score(token: str, text: str) -> float:
    best = 0.0
    for word in text.split():
        if token in word:
            return 100.0
        best = max(best, fuzz.ratio(token, word))
    return best


def _text_score(tokens: list[str], text: str) -> float:
    return sum(_token_score(t, text) for t in tokens) / len(tokens)


def score_project(project: Project, terms: list[list[str]]) -> RelevanceScore:
    """Best raw field score and best weighted field score across all terms."""
    name = default_process(project.name)
    description = default_process(project.description)
    tags = [default_process(tag) for tag in project.tags]

    raw_best = 0.0
    weighted_best = 0.0
    for tokens in terms:
        fields = {
            "name": _text_score(tokens, name),
            "tags": max((_text_score(tokens, tag) for tag in tags), default=0.0),
            "description": _text_score(tokens, description),
        }
        for field, raw in fields.items():
            raw_best = max(raw_best, raw)
            weighted_best = max(weighted_best, raw * FIELD_WEIGHTS[field])
    return RelevanceScore(raw=raw_best, weighted=weighted_best)


def filter_by_relevance(
    projects: Iterable[Project],
    query: Optional[str],
    threshold: Optional[float] = None,
) -> list[Project]:
    """Drop projects whose best field score is below ``threshold``; order the rest by weighted score.

    No query -> input returned unchanged.
    """
    items = list(projects)
    terms = query_terms(query)
    if not terms:
        return items

    cutoff = search_config.fuzzy_threshold() if threshold is None else threshold
    scored: list[tuple[float, Project]] = []
    for project in items:
        score = score_project(project, terms)
        if score.raw >= cutoff:
            scored.append((score.weighted, project))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    log.debug("relevance_filter query=%r kept=%s of=%s", query, len(scored), len(items))
    return [project for _, project in scored]
