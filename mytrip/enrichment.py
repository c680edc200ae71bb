"""Pet-friendliness enrichment and post-filtering of a result page."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from .models import PetInfo, TourItem
from .pet import is_pet_friendly, matches_pet_size_filter

logger = logging.getLogger(__name__)

MAX_WORKERS = 20


class PetInfoSource(Protocol):

    def fetch_pet_info(self, content_id: str) -> Optional[PetInfo]:
        ...


@dataclass(frozen=True)
class EnrichmentResult:
    """Surviving items plus the lookup results for every input item."""

    items: List[TourItem]
    pet_info: Dict[str, Optional[PetInfo]] = field(default_factory=dict)


def fetch_pet_info_map(
    source: PetInfoSource,
    items: Sequence[TourItem],
    max_workers: int = MAX_WORKERS,
) -> Dict[str, Optional[PetInfo]]:
    """Look up pet info for every item concurrently.

    Waits for all lookups to settle. A failed lookup is logged and stored as
    ``None``, so the map always has one entry per distinct content id.
    """
    if not items:
        return {}

    results: Dict[str, Optional[PetInfo]] = {}
    workers = max(1, min(max_workers, len(items)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(source.fetch_pet_info, item.content_id):
            item.content_id
            for item in items
        }
        for future in as_completed(futures):
            content_id = futures[future]
            try:
                results[content_id] = future.result()
            except Exception:  # noqa: BLE001
                logger.warning("Pet info lookup failed for %s",
                               content_id,
                               exc_info=True)
                results[content_id] = None

    logger.info("Resolved pet info for %d/%d item(s)",
                sum(1 for info in results.values() if info is not None),
                len(results))
    return results


def filter_pet_friendly(
    items: Iterable[TourItem],
    pet_info: Dict[str, Optional[PetInfo]],
    pet_size: Sequence[str] | None = None,
) -> List[TourItem]:
    """Keep pet-friendly items (and matching sizes), preserving order."""
    sizes = [size for size in (pet_size or ()) if size]
    kept: List[TourItem] = []
    for item in items:
        info = pet_info.get(item.content_id)
        if not is_pet_friendly(info):
            continue
        if sizes and not matches_pet_size_filter(info, sizes):
            continue
        kept.append(item)
    return kept


def enrich_page(
    source: PetInfoSource,
    items: Sequence[TourItem],
    pet_friendly: bool,
    pet_size: Sequence[str] | None = None,
    max_workers: int = MAX_WORKERS,
) -> EnrichmentResult:
    """Apply the pet filter to one page of results.

    Without ``pet_friendly`` this is the identity and issues no lookups.
    """
    if not pet_friendly:
        return EnrichmentResult(items=list(items), pet_info={})

    pet_info = fetch_pet_info_map(source, items, max_workers=max_workers)
    kept = filter_pet_friendly(items, pet_info, pet_size)
    logger.info("Pet filter kept %d of %d item(s)", len(kept), len(items))
    return EnrichmentResult(items=kept, pet_info=pet_info)
