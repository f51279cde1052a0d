"""Per-source fetchers: build the upstream query, call the client, normalize.

A fetcher never raises. Upstream failures are logged and reported as
``FetchResult(projects=[], ok=False)`` so one bad source cannot fail a request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from app.models.project import Project, Source
from app.models.search import SortMode
from app.services import search_config
from app.services.github_client import GitHubClient, UpstreamError
from app.services.huggingface_client import HuggingFaceClient
from app.services.normalizer import normalize

log = logging.getLogger(__name__)


@dataclass
class FetchResult:
    source: Source
    term: str
    projects: list[Project] = field(default_factory=list)
    ok: bool = True


def split_terms(query: Optional[str]) -> list[str]:
    """Comma-separated query -> one term per upstream call. Empty query -> ['']."""
    terms: list[str] = []
    seen: set[str] = set()
    for chunk in (query or "").split(","):
        term = chunk.strip()
        if not term or term.lower() in seen:
            continue
        seen.add(term.lower())
        terms.append(term)
    return terms or [""]


def cutoff_date(days: int, now: Optional[datetime] = None) -> str:
    """ISO date (YYYY-MM-DD) ``days`` before now, UTC."""
    current = now or datetime.now(timezone.utc)
    return (current - timedelta(days=days)).date().isoformat()


class SourceFetcher:
    source: Source

    async def _fetch_raw(self, term: str, sort: SortMode) -> list[dict]:
        raise NotImplementedError

    async def fetch(self, term: str, sort: SortMode = SortMode.DEFAULT) -> FetchResult:
        try:
            raw = await self._fetch_raw(term, sort)
        except (UpstreamError, httpx.HTTPError) as exc:
            log.warning("source_fetch_failed source=%s term=%r error=%s", self.source.value, term, exc)
            return FetchResult(source=self.source, term=term, ok=False)
        projects = [normalize(item, self.source) for item in raw]
        log.debug("source_fetch_ok source=%s term=%r count=%s", self.source.value, term, len(projects))
        return FetchResult(source=self.source, term=term, projects=projects)


class GitHubFetcher(SourceFetcher):
    source = Source.GITHUB

    def __init__(self, client: Optional[GitHubClient] = None, now: Optional[datetime] = None) -> None:
        self._client = client
        self._now = now

    def build_query(self, term: str, sort: SortMode) -> str:
        anchor = search_config.GITHUB_ANCHOR_TERM
        term = term.strip()
        if not term:
            q = anchor
        elif anchor in term.lower().split():
            q = term
        else:
            q = f"{term} {anchor}"
        if sort.lookback_days is not None:
            q += f" pushed:>{cutoff_date(sort.lookback_days, self._now)}"
        return q

    async def _fetch_raw(self, term: str, sort: SortMode) -> list[dict]:
        client = self._client or GitHubClient()
        return await client.search_repositories(
            self.build_query(term, sort),
            sort="stars",
            per_page=search_config.per_source_limit(),
        )


class HuggingFaceFetcher(SourceFetcher):
    source = Source.HUGGING_FACE

    def __init__(self, client: Optional[HuggingFaceClient] = None, now: Optional[datetime] = None) -> None:
        self._client = client
        self._now = now

    def build_params(self, term: str, sort: SortMode) -> dict:
        params: dict = {
            "sort": "lastModified" if sort.lookback_days is not None else "downloads",
            "limit": search_config.per_source_limit(),
            "pipeline_tag": "|".join(search_config.HUGGINGFACE_PIPELINE_TAGS),
        }
        if term.strip():
            params["search"] = term.strip()
        return params

    def _within_window(self, item: dict, days: int) -> bool:
        modified = str(item.get("lastModified") or "")[:10]
        if not modified:
            return True
        return modified >= cutoff_date(days, self._now)

    async def _fetch_raw(self, term: str, sort: SortMode) -> list[dict]:
        client = self._client or HuggingFaceClient()
        items = await client.list_models(**self.build_params(term, sort))
        if sort.lookback_days is not None:
            items = [item for item in items if self._within_window(item, sort.lookback_days)]
        return items


def default_fetchers() -> dict[Source, SourceFetcher]:
    return {
        Source.GITHUB: GitHubFetcher(),
        Source.HUGGING_FACE: HuggingFaceFetcher(),
    }
