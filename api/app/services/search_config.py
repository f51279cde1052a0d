"""Search configuration: env-driven limits, timeouts and upstream endpoints.

Values are read at call time so tests and deployments can override them
through the environment without reloading modules.
"""

from __future__ import annotations

import os

DEFAULT_PER_SOURCE_LIMIT = 50
DEFAULT_UPSTREAM_TIMEOUT_S = 20.0
DEFAULT_FUZZY_THRESHOLD = 75.0
DEFAULT_SMART_SEARCH_TIMEOUT_S = 15.0

# Domain anchors keep upstream results on-topic for generic queries.
GITHUB_ANCHOR_TERM = "robotics"
HUGGINGFACE_PIPELINE_TAGS = (
    "reinforcement-learning",
    "computer-vision",
    "text-to-speech",
    "automatic-speech-recognition",
    "visual-question-answering",
)


def _float_env(name: str, default: float, lo: float, hi: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return min(hi, max(lo, float(raw)))
    except ValueError:
        return default


def _str_env(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def per_source_limit() -> int:
    return int(_float_env("SEARCH_PER_SOURCE_LIMIT", DEFAULT_PER_SOURCE_LIMIT, 1, 100))


def upstream_timeout_seconds() -> float:
    return _float_env("SEARCH_UPSTREAM_TIMEOUT_S", DEFAULT_UPSTREAM_TIMEOUT_S, 1.0, 120.0)


def fuzzy_threshold() -> float:
    return _float_env("SEARCH_FUZZY_THRESHOLD", DEFAULT_FUZZY_THRESHOLD, 0.0, 100.0)


def smart_search_timeout_seconds() -> float:
    return _float_env("SMART_SEARCH_TIMEOUT_S", DEFAULT_SMART_SEARCH_TIMEOUT_S, 1.0, 120.0)


def github_api_url() -> str:
    return _str_env("GITHUB_API_URL", "https://api.github.com").rstrip("/")


def huggingface_api_url() -> str:
    return _str_env("HUGGINGFACE_API_URL", "https://huggingface.co").rstrip("/")


def openrouter_model() -> str:
    return _str_env("OPENROUTER_MODEL", "openrouter/free")
