"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Every test starts from defaults: no credentials, public upstream URLs.
    for key in (
        "GITHUB_TOKEN",
        "GH_TOKEN",
        "HF_TOKEN",
        "OPENROUTER_API_KEY",
        "OPENROUTER_CHAT_URL",
        "OPENROUTER_MODEL",
        "GITHUB_API_URL",
        "HUGGINGFACE_API_URL",
        "SEARCH_PER_SOURCE_LIMIT",
        "SEARCH_UPSTREAM_TIMEOUT_S",
        "SEARCH_FUZZY_THRESHOLD",
        "SMART_SEARCH_TIMEOUT_S",
    ):
        monkeypatch.delenv(key, raising=False)


def github_repo(
    repo_id: int,
    full_name: str,
    *,
    description: str | None = None,
    topics: list[str] | None = None,
    stars: int | None = 0,
) -> dict:
    return {
        "id": repo_id,
        "full_name": full_name,
        "description": description,
        "html_url": f"https://github.com/{full_name}",
        "topics": topics or [],
        "stargazers_count": stars,
    }


def hf_model(
    model_id: str,
    *,
    pipeline_tag: str | None = None,
    tags: list[str] | None = None,
    downloads: int | None = 0,
    last_modified: str | None = None,
) -> dict:
    item = {
        "id": model_id,
        "modelId": model_id,
        "pipeline_tag": pipeline_tag,
        "tags": tags or [],
        "downloads": downloads,
    }
    if last_modified:
        item["lastModified"] = last_modified
    return item


@pytest.fixture
def make_github_repo():
    return github_repo


@pytest.fixture
def make_hf_model():
    return hf_model
