"""Hugging Face model hub listing client."""

from __future__ import annotations

import os
from typing import Any, Optional

import httpx

from app.services import search_config
from app.services.github_client import UpstreamError


class HuggingFaceClientError(UpstreamError):
    pass


class HuggingFaceClient:
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        env_token = (os.getenv("HF_TOKEN") or "").strip() or None
        self._token = token or env_token
        self._base_url = (base_url or search_config.huggingface_api_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else search_config.upstream_timeout_seconds()
        self._headers = {"Accept": "application/json"}
        if self._token:
            self._headers["Authorization"] = f"Bearer {self._token}"

    async def list_models(
        self,
        *,
        search: Optional[str] = None,
        sort: str = "downloads",
        limit: int = 50,
        pipeline_tag: Optional[str] = None,
    ) -> list[dict]:
        """GET /api/models. ``search`` and ``pipeline_tag`` are sent only when set."""
        params: dict[str, Any] = {"sort": sort, "limit": limit}
        if search:
            params["search"] = search
        if pipeline_tag:
            params["pipeline_tag"] = pipeline_tag

        async with httpx.AsyncClient(timeout=self._timeout, headers=self._headers) as client:
            r = await client.get(f"{self._base_url}/api/models", params=params)

        if r.status_code >= 400:
            raise HuggingFaceClientError(f"Hugging Face API error {r.status_code}: {r.text[:200]}")
        try:
            data = r.json()
        except ValueError as exc:
            raise HuggingFaceClientError(f"Hugging Face API returned non-JSON body: {r.text[:200]}") from exc
        if not isinstance(data, list):
            raise HuggingFaceClientError(f"Unexpected Hugging Face payload type: {type(data).__name__}")
        return [item for item in data if isinstance(item, dict)]
