"""Map raw upstream records to Project. Pure; never raises on missing fields."""

from __future__ import annotations

from typing import Any, Callable

from app.models.project import Project, Source

HUGGINGFACE_WEB = "https://huggingface.co"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _count(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _tags(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    out: list[str] = []
    for tag in value:
        text = _text(tag)
        if text:
            out.append(text)
    return out


def normalize_github_repo(item: dict) -> Project:
    name = _text(item.get("full_name")) or _text(item.get("name"))
    return Project(
        id=_text(item.get("id")) or name,
        name=name,
        description=_text(item.get("description")),
        url=_text(item.get("html_url")),
        source=Source.GITHUB,
        tags=_tags(item.get("topics")),
        popularity_score=_count(item.get("stargazers_count")),
    )


def normalize_huggingface_model(item: dict) -> Project:
    model_id = _text(item.get("modelId")) or _text(item.get("id"))
    return Project(
        id=_text(item.get("id")) or model_id or _text(item.get("_id")),
        name=model_id,
        # The hub has no free-text description in listings; the pipeline tag is the closest.
        description=_text(item.get("pipeline_tag")),
        url=f"{HUGGINGFACE_WEB}/{model_id}" if model_id else HUGGINGFACE_WEB,
        source=Source.HUGGING_FACE,
        tags=_tags(item.get("tags")),
        popularity_score=_count(item.get("downloads")),
    )


_NORMALIZERS: dict[Source, Callable[[dict], Project]] = {
    Source.GITHUB: normalize_github_repo,
    Source.HUGGING_FACE: normalize_huggingface_model,
}


def normalize(raw: dict, source: Source) -> Project:
    return _NORMALIZERS[source](raw if isinstance(raw, dict) else {})
