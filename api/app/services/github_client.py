"""GitHub repository search client.

REST wrapper with:
- optional token auth (GITHUB_TOKEN)
- rate-limit exhaustion reported as an error instead of sleeping
"""

from __future__ import annotations

import os
from typing import Any, Optional

import httpx

from app.services import search_config


class UpstreamError(RuntimeError):
    """An upstream search API answered with an error or an unusable payload."""


class GitHubClientError(UpstreamError):
    pass


class GitHubClient:
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        user_agent: str = "robotics-federation/1.0",
        timeout: Optional[float] = None,
    ) -> None:
        env_token = os.getenv("GITHUB_TOKEN")
        if not env_token:
            env_token = os.getenv("GH_TOKEN")
        if env_token:
            env_token = env_token.strip() or None
        self._token = token or env_token
        self._base_url = (base_url or search_config.github_api_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else search_config.upstream_timeout_seconds()
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            self._headers["Authorization"] = f"Bearer {self._token}"

    async def _get(self, path: str, params: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, headers=self._headers) as client:
            return await client.get(f"{self._base_url}{path}", params=params)

    async def search_repositories(self, q: str, sort: str = "stars", per_page: int = 50) -> list[dict]:
        """GET /search/repositories and return its ``items``."""
        r = await self._get("/search/repositories", {"q": q, "sort": sort, "per_page": per_page})

        if r.status_code == 403 and r.headers.get("X-RateLimit-Remaining") == "0":
            raise GitHubClientError(
                f"GitHub API rate limit exhausted (reset={r.headers.get('X-RateLimit-Reset', '?')})"
            )
        if r.status_code >= 400:
            raise GitHubClientError(f"GitHub API error {r.status_code} for {r.request.url}: {r.text[:200]}")

        try:
            data = r.json()
        except ValueError as exc:
            raise GitHubClientError(f"GitHub API returned non-JSON body: {r.text[:200]}") from exc
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise GitHubClientError("GitHub API payload missing items")
        return [item for item in items if isinstance(item, dict)]
