"""Search pipeline: aggregate -> category -> relevance -> tags -> rank."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from app.models.project import Project, Source
from app.models.search import SearchRequest
from app.services import aggregator, category_filter, ranker, relevance_service, tag_filter
from app.services.source_fetchers import SourceFetcher

log = logging.getLogger(__name__)


async def run_search(
    request: SearchRequest,
    fetchers: Optional[Mapping[Source, SourceFetcher]] = None,
) -> list[Project]:
    fetched = await aggregator.aggregate(request, fetchers=fetchers)
    in_category = category_filter.filter_by_category(fetched, request.category)
    relevant = relevance_service.filter_by_relevance(in_category, request.query)
    tagged = tag_filter.filter_by_tags(relevant, request.tags)
    ranked = ranker.rank(tagged)
    log.info(
        "search_pipeline query=%r source=%s sort=%s category=%s fetched=%s category_kept=%s relevant=%s tagged=%s",
        request.query,
        request.source.value,
        request.sort.value,
        request.category.value if request.category else "none",
        len(fetched),
        len(in_category),
        len(relevant),
        len(ranked),
    )
    return ranked
