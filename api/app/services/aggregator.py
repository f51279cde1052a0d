"""Fan out to every enabled fetcher concurrently, then merge and deduplicate."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Optional

from app.models.project import Project, Source
from app.models.search import SearchRequest
from app.services.source_fetchers import FetchResult, SourceFetcher, default_fetchers, split_terms

log = logging.getLogger(__name__)


def dedupe(projects: Iterable[Project]) -> list[Project]:
    """Keep the first occurrence of each (id, source)."""
    seen: set[tuple[str, Source]] = set()
    out: list[Project] = []
    for project in projects:
        if project.key in seen:
            continue
        seen.add(project.key)
        out.append(project)
    return out


async def aggregate(
    request: SearchRequest,
    fetchers: Optional[Mapping[Source, SourceFetcher]] = None,
) -> list[Project]:
    available = fetchers if fetchers is not None else default_fetchers()
    enabled = [available[s] for s in request.source.sources() if s in available]
    if not enabled:
        return []

    terms = split_terms(request.query)
    jobs = [fetcher.fetch(term, request.sort) for fetcher in enabled for term in terms]
    settled = await asyncio.gather(*jobs, return_exceptions=True)

    merged: list[Project] = []
    failed = 0
    for outcome in settled:
        if isinstance(outcome, BaseException):
            # fetch() already guards upstream errors; anything else still must not fail the request.
            log.warning("aggregate_fetch_crashed error=%r", outcome)
            failed += 1
            continue
        result: FetchResult = outcome
        if not result.ok:
            failed += 1
        merged.extend(result.projects)

    projects = dedupe(merged)
    log.info(
        "aggregate_done sources=%s terms=%s calls=%s failed=%s raw=%s unique=%s",
        ",".join(f.source.value for f in enabled),
        len(terms),
        len(jobs),
        failed,
        len(merged),
        len(projects),
    )
    return projects
