"""Minimal OpenRouter client used as the text-completion backend for smart search.

Small and dependency-free (httpx only).
"""

from __future__ import annotations

import os
import time
from typing import Any, Optional

import httpx

from app.services import search_config


class OpenRouterError(RuntimeError):
    pass


class MissingCredentialError(OpenRouterError):
    """OPENROUTER_API_KEY is not set."""


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def api_key() -> str:
    return os.getenv("OPENROUTER_API_KEY", "").strip()


def is_configured() -> bool:
    return bool(api_key())


async def chat_completion(
    prompt: str,
    *,
    model: Optional[str] = None,
    timeout_s: float = 30.0,
) -> tuple[str, dict[str, Any]]:
    """Return (content, meta).

    meta includes: status_code, elapsed_ms, response_id.
    """
    key = api_key()
    if not key:
        raise MissingCredentialError("OPENROUTER_API_KEY is not configured")

    url = os.getenv("OPENROUTER_CHAT_URL", "https://openrouter.ai/api/v1/chat/completions").strip()
    if not url:
        raise OpenRouterError("OPENROUTER_CHAT_URL is empty")

    headers: dict[str, str] = {
        "Authorization": f"Bearer {key}",
        "Content-Type": "application/json",
    }
    referer = (os.getenv("OPENROUTER_HTTP_REFERER") or os.getenv("PUBLIC_APP_URL") or "").strip()
    title = (os.getenv("OPENROUTER_X_TITLE") or "Robotics-Federation").strip()
    if referer:
        headers["HTTP-Referer"] = referer
    if title:
        headers["X-Title"] = title

    try:
        temperature = float(os.getenv("OPENROUTER_TEMPERATURE", "0.2") or 0.2)
    except ValueError:
        temperature = 0.2
    payload: dict[str, Any] = {
        "model": model or search_config.openrouter_model(),
        "messages": [{"role": "user", "content": prompt}],
        "temperature": temperature,
    }
    if _truthy(os.getenv("OPENROUTER_DISABLE_STREAM", "1")):
        payload["stream"] = False

    started = time.perf_counter()
    try:
        async with httpx.AsyncClient(timeout=timeout_s, headers=headers) as client:
            resp = await client.post(url, json=payload)
    except httpx.HTTPError as exc:
        raise OpenRouterError(f"OpenRouter request failed: {exc}") from exc
    elapsed_ms = int(round((time.perf_counter() - started) * 1000))

    status = int(resp.status_code)
    try:
        data = resp.json()
    except ValueError as exc:
        body_preview = (resp.text or "")[:500]
        raise OpenRouterError(f"OpenRouter response was not JSON (status={status}): {body_preview}") from exc

    if status >= 400:
        err = data.get("error") if isinstance(data, dict) else None
        raise OpenRouterError(f"OpenRouter error (status={status}): {err or data}")

    if not isinstance(data, dict):
        raise OpenRouterError(f"Unexpected OpenRouter payload type: {type(data).__name__}")

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise OpenRouterError("OpenRouter payload missing choices")

    msg = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = (msg or {}).get("content") if isinstance(msg, dict) else None
    if not isinstance(content, str):
        raise OpenRouterError("OpenRouter payload missing message.content")

    meta = {
        "status_code": status,
        "elapsed_ms": elapsed_ms,
        "response_id": str(data.get("id") or ""),
    }
    return content, meta
