"""Client-side ordering of result pages."""

from __future__ import annotations

import datetime as dt
import functools
import unicodedata
from typing import Iterable, List, Optional

import icu

from .models import TourItem

EPOCH = dt.datetime(1970, 1, 1)
_TIME_FORMATS = ("%Y%m%d%H%M%S", "%Y%m%d", "%Y-%m-%dT%H:%M:%S",
                 "%Y-%m-%d %H:%M:%S", "%Y-%m-%d")


def parse_modified_time(value: Optional[str]) -> dt.datetime:
    """Parse ``modifiedtime``; missing or unreadable values map to the epoch."""
    if not value:
        return EPOCH
    text = value.strip()
    for fmt in _TIME_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        parsed = dt.datetime.fromisoformat(text)
    except ValueError:
        return EPOCH
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return parsed


@functools.lru_cache(maxsize=None)
def korean_collator() -> icu.Collator:
    """Shared ko_KR collator; sort key generation does not mutate it."""
    collator = icu.Collator.createInstance(icu.Locale("ko_KR"))
    collator.setAttribute(icu.UCollAttribute.NORMALIZATION_MODE,
                          icu.UCollAttributeValue.ON)
    return collator


def collation_key(title: Optional[str]) -> bytes:
    """Korean collation key: Hanja by reading, fullwidth forms as ASCII."""
    return korean_collator().getSortKey(unicodedata.normalize("NFC", title or ""))


def sort_by_latest(items: Iterable[TourItem]) -> List[TourItem]:
    return sorted(items,
                  key=lambda item: parse_modified_time(item.modified_time),
                  reverse=True)


def sort_by_name(items: Iterable[TourItem]) -> List[TourItem]:
    return sorted(items, key=lambda item: collation_key(item.title))


def sort_tours(items: Iterable[TourItem], key: str = "latest") -> List[TourItem]:
    """Return a new, stably ordered list; unknown keys sort by ``latest``."""
    if key == "name":
        return sort_by_name(items)
    return sort_by_latest(items)
