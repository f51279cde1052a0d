"""Smart search: expand a description into keywords, search, fall back, suggest.

Flow, one handler per state:

    RECEIVED  --expand-->   EXPANDED
    EXPANDED  --search-->   SEARCHED | FALLBACK (no results)
    FALLBACK  --search raw description--> SEARCHED
    SEARCHED  --suggest-->  SUGGESTED
    SUGGESTED ------------> DONE

Collaborator failures never fail the flow: expansion falls back to the raw
description and suggestion falls back to an empty list. Only a missing
OPENROUTER_API_KEY (checked before any fetch) or a failing/timed-out search
raises.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

from rapidfuzz.utils import default_process

from app.models.project import Project
from app.models.search import SearchRequest, SourceFilter
from app.services import openrouter_client, search_config, search_service
from app.services.openrouter_client import MissingCredentialError, OpenRouterError

log = logging.getLogger(__name__)

MAX_KEYWORDS = 8
MAX_SUGGESTIONS = 5
SUGGESTION_SAMPLE = 5

EXPAND_PROMPT = (
    "You help people find open-source robotics projects on GitHub and Hugging Face.\n"
    "Turn the description below into 3 to 6 search keywords or short phrases, "
    "ordered from general to most specific.\n"
    "Reply with the keywords only, separated by commas.\n\n"
    "Description: {description}"
)

SUGGEST_PROMPT = (
    "A user searched for robotics projects with: {description}\n"
    "The top results were:\n{results}\n\n"
    "Suggest 3 to 5 additional search keywords drawn from these results' names and tags. "
    "Do not repeat any term already in the user's search.\n"
    "Reply with the keywords only, separated by commas."
)

_LIST_MARKER = re.compile(r"^\s*(?:[-*•]+|\d+[.)])\s*")

Completer = Callable[[str], Awaitable[str]]
Searcher = Callable[[SearchRequest], Awaitable[list[Project]]]


def _words(text: str) -> str:
    return " ".join(default_process(text).split())


class ExpansionState(str, Enum):
    RECEIVED = "received"
    EXPANDED = "expanded"
    SEARCHED = "searched"
    FALLBACK = "fallback"
    SUGGESTED = "suggested"
    DONE = "done"


class SmartSearchError(RuntimeError):
    """The search pipeline failed or timed out inside smart search."""


@dataclass
class SmartSearchResult:
    keywords: str
    results: list[Project] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


def parse_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """Completion text -> clean keyword list (bullets, numbering, quotes removed; deduped)."""
    out: list[str] = []
    seen: set[str] = set()
    for chunk in re.split(r"[,\n;]", text or ""):
        keyword = _LIST_MARKER.sub("", chunk).strip().strip("\"'`").strip()
        if not keyword or keyword.casefold() in seen:
            continue
        seen.add(keyword.casefold())
        out.append(keyword)
        if len(out) >= limit:
            break
    return out


async def _openrouter_complete(prompt: str) -> str:
    content, _meta = await openrouter_client.chat_completion(prompt)
    return content


class SmartSearch:
    def __init__(
        self,
        description: str,
        *,
        complete: Optional[Completer] = None,
        search: Optional[Searcher] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.description = description.strip()
        self._complete = complete or _openrouter_complete
        self._search = search or search_service.run_search
        self._timeout_s = timeout_s if timeout_s is not None else search_config.smart_search_timeout_seconds()
        self.state = ExpansionState.RECEIVED
        self.history: list[ExpansionState] = [self.state]
        self.keywords = self.description
        self.results: list[Project] = []
        self.suggestions: list[str] = []

    async def run(self) -> SmartSearchResult:
        if not openrouter_client.is_configured():
            raise MissingCredentialError("OPENROUTER_API_KEY is not configured; smart search is unavailable")

        handlers = {
            ExpansionState.RECEIVED: self._expand,
            ExpansionState.EXPANDED: self._search_expanded,
            ExpansionState.FALLBACK: self._search_description,
            ExpansionState.SEARCHED: self._suggest,
            ExpansionState.SUGGESTED: self._finish,
        }
        while self.state is not ExpansionState.DONE:
            self.state = await handlers[self.state]()
            self.history.append(self.state)

        log.info(
            "smart_search_done path=%s keywords=%r results=%s suggestions=%s",
            ">".join(s.value for s in self.history),
            self.keywords,
            len(self.results),
            len(self.suggestions),
        )
        return SmartSearchResult(keywords=self.keywords, results=self.results, suggestions=self.suggestions)

    async def _expand(self) -> ExpansionState:
        try:
            text = await self._complete(EXPAND_PROMPT.format(description=self.description))
        except OpenRouterError as exc:
            log.warning("smart_search_expand_failed error=%s", exc)
            return ExpansionState.EXPANDED
        keywords = parse_keywords(text)
        if keywords:
            self.keywords = ", ".join(keywords)
        return ExpansionState.EXPANDED

    async def _search_expanded(self) -> ExpansionState:
        self.results = await self._bounded_search(self.keywords)
        if not self.results and self.keywords != self.description:
            return ExpansionState.FALLBACK
        return ExpansionState.SEARCHED

    async def _search_description(self) -> ExpansionState:
        self.results = await self._bounded_search(self.description)
        return ExpansionState.SEARCHED

    async def _suggest(self) -> ExpansionState:
        if not self.results:
            return ExpansionState.SUGGESTED
        lines = []
        for project in self.results[:SUGGESTION_SAMPLE]:
            tags = ", ".join(project.tags[:8])
            lines.append(f"- {project.name}" + (f" [{tags}]" if tags else ""))
        prompt = SUGGEST_PROMPT.format(description=self.description, results="\n".join(lines))
        try:
            text = await self._complete(prompt)
        except OpenRouterError as exc:
            log.warning("smart_search_suggest_failed error=%s", exc)
            return ExpansionState.SUGGESTED
        self.suggestions = self._exclude_known(parse_keywords(text))[:MAX_SUGGESTIONS]
        return ExpansionState.SUGGESTED

    async def _finish(self) -> ExpansionState:
        return ExpansionState.DONE

    def _exclude_known(self, keywords: list[str]) -> list[str]:
        """Drop keywords that already appear as whole words in the description."""
        known = f" {_words(self.description)} "
        return [k for k in keywords if f" {_words(k)} " not in known]

    async def _bounded_search(self, query: str) -> list[Project]:
        request = SearchRequest(query=query, source=SourceFilter.ALL)
        try:
            return await asyncio.wait_for(self._search(request), timeout=self._timeout_s)
        except TimeoutError as exc:
            raise SmartSearchError(f"Search timed out after {self._timeout_s:g}s") from exc
        except Exception as exc:
            raise SmartSearchError(f"Search failed: {exc}") from exc


async def smart_search(description: str, **kwargs) -> SmartSearchResult:
    return await SmartSearch(description, **kwargs).run()
