"""Fetch, enrich and order one page of tours for a filter configuration."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .api import DEFAULT_PAGE_SIZE
from .enrichment import MAX_WORKERS, enrich_page
from .filters import DEFAULT_AREA_CODE, FilterState
from .models import PetInfo, TourListResult, TourPage
from .sorting import sort_tours

logger = logging.getLogger(__name__)


class TourSource(Protocol):

    def browse_by_region(self,
                         area_code: str,
                         content_type_id: str | None = None,
                         page_size: int = DEFAULT_PAGE_SIZE,
                         page_number: int = 1) -> TourListResult:
        ...

    def search_by_keyword(self,
                          keyword: str,
                          area_code: str | None = None,
                          content_type_id: str | None = None,
                          page_size: int = DEFAULT_PAGE_SIZE,
                          page_number: int = 1) -> TourListResult:
        ...

    def fetch_pet_info(self, content_id: str) -> Optional[PetInfo]:
        ...


def fetch_page(source: TourSource,
               filters: FilterState,
               page_number: int,
               page_size: int = DEFAULT_PAGE_SIZE) -> TourListResult:
    """Pick search or region browse depending on the keyword."""
    if filters.is_search:
        area_code = (filters.area_code
                     if filters.area_code != DEFAULT_AREA_CODE else None)
        logger.info("Searching %r (area=%s, type=%s, page=%d)",
                    filters.keyword, area_code, filters.content_type_id,
                    page_number)
        return source.search_by_keyword(
            filters.keyword,
            area_code=area_code,
            content_type_id=filters.content_type_id,
            page_size=page_size,
            page_number=page_number,
        )
    logger.info("Browsing area %s (type=%s, page=%d)", filters.area_code,
                filters.content_type_id, page_number)
    return source.browse_by_region(
        filters.area_code,
        content_type_id=filters.content_type_id,
        page_size=page_size,
        page_number=page_number,
    )


def load_tours(source: TourSource,
               filters: FilterState,
               page_number: int = 1,
               page_size: int = DEFAULT_PAGE_SIZE,
               max_workers: int = MAX_WORKERS) -> TourPage:
    """Run the full page pipeline: fetch, pet filter, sort."""
    result = fetch_page(source, filters, page_number, page_size=page_size)
    enriched = enrich_page(
        source,
        result.items,
        pet_friendly=filters.pet_friendly,
        pet_size=filters.pet_size,
        max_workers=max_workers,
    )
    items = sort_tours(enriched.items, filters.sort)
    logger.debug("Page %d: %d item(s) of %d total", page_number, len(items),
                 result.total_count)
    return TourPage(
        items=items,
        pet_info=enriched.pet_info,
        total_count=result.total_count,
        page_no=page_number,
        page_size=page_size,
    )
