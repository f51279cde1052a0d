"""Federated project search routes.

- GET /api/search        -> ranked Project list from GitHub + Hugging Face
- POST /api/smart-search -> keywords expanded from a description, results, follow-up suggestions
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from app.models.error import ErrorDetail
from app.models.project import Project
from app.models.search import SearchRequest, SmartSearchRequest, SmartSearchResponse
from app.services import query_expander, search_service
from app.services.openrouter_client import MissingCredentialError
from app.services.query_expander import SmartSearchError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/search", response_model=List[Project])
async def search(
    query: Optional[str] = Query(None, description="Free text; commas split it into separate upstream searches."),
    source: Optional[str] = Query(None, description="All | GitHub | Hugging Face"),
    tags: Optional[str] = Query(None, description="Comma-separated tags; keep projects with any of them."),
    sort: Optional[str] = Query(None, description="default | growth_week | growth_month"),
    category: Optional[str] = Query(None, description="Robot category slug or display label."),
    robot_type: Optional[str] = Query(None, alias="robotType", include_in_schema=False),
) -> List[Project]:
    request = SearchRequest.from_params(
        query=query,
        source=source,
        tags=tags,
        sort=sort,
        category=category or robot_type,
    )
    return await search_service.run_search(request)


@router.post(
    "/smart-search",
    response_model=SmartSearchResponse,
    responses={400: {"model": ErrorDetail}, 500: {"model": ErrorDetail}},
)
async def smart_search(body: Optional[SmartSearchRequest] = None) -> SmartSearchResponse:
    description = ((body.description if body else None) or "").strip()
    if not description:
        raise HTTPException(status_code=400, detail="description is required")
    try:
        result = await query_expander.smart_search(description)
    except MissingCredentialError as exc:
        logger.error("smart_search_unconfigured error=%s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except SmartSearchError as exc:
        logger.error("smart_search_failed error=%s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return SmartSearchResponse(
        keywords=result.keywords,
        results=result.results,
        suggestions=result.suggestions,
    )
