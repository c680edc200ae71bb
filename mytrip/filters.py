"""Filter state and its query-string codec.

The query string is the only shareable state of a browsing session, so every
consumer (the page loader, the pagination controller, the filter controller)
receives a decoded :class:`FilterState` instead of parsing parameters itself.
Default values are never written back out: ``areaCode=1``, ``sort=latest`` and
``page=1`` all disappear on encode.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

DEFAULT_AREA_CODE = "1"
DEFAULT_SORT = "latest"
DEFAULT_PAGE = 1
SORT_OPTIONS = ("latest", "name")

# field name -> query parameter name, in serialisation order
QUERY_KEYS: Dict[str, str] = {
    "area_code": "areaCode",
    "content_type_id": "contentTypeId",
    "sort": "sort",
    "pet_friendly": "petFriendly",
    "pet_size": "petSize",
    "keyword": "keyword",
    "page": "page",
    "selected_tour_id": "selectedTourId",
}


@dataclass(frozen=True)
class FilterState:
    """Canonical filter/search configuration for one browsing view."""

    area_code: str = DEFAULT_AREA_CODE
    content_type_id: Optional[str] = None
    sort: str = DEFAULT_SORT
    pet_friendly: bool = False
    pet_size: Optional[Tuple[str, ...]] = None
    keyword: Optional[str] = None
    page: int = DEFAULT_PAGE
    selected_tour_id: Optional[str] = None

    @property
    def is_search(self) -> bool:
        return bool(self.keyword)

    def configuration_key(self) -> Tuple[Any, ...]:
        """Fields that decide which result set is shown.

        ``page`` and ``selected_tour_id`` are excluded: changing them does not
        invalidate pages that were already accumulated.
        """
        return (
            self.area_code,
            self.content_type_id,
            self.sort,
            self.pet_friendly,
            self.pet_size,
            self.keyword,
        )


def _get(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    value = str(value)
    return value or None


def _split_sizes(raw: Optional[str]) -> Optional[Tuple[str, ...]]:
    if not raw:
        return None
    sizes = tuple(part for part in raw.split(",") if part)
    return sizes or None


def _parse_page(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_PAGE
    try:
        page = int(raw, 10)
    except ValueError:
        return DEFAULT_PAGE
    return page if page >= 1 else DEFAULT_PAGE


def decode(params: Mapping[str, Any]) -> FilterState:
    """Build a :class:`FilterState` from raw query parameters.

    Missing or empty keys take their documented default. ``petFriendly`` is
    true only for the literal ``"true"``; an unknown ``sort`` or an
    unparseable ``page`` silently falls back to the default.
    """
    sort = _get(params, "sort")
    if sort not in SORT_OPTIONS:
        sort = DEFAULT_SORT
    return FilterState(
        area_code=_get(params, "areaCode") or DEFAULT_AREA_CODE,
        content_type_id=_get(params, "contentTypeId"),
        sort=sort,
        pet_friendly=_get(params, "petFriendly") == "true",
        pet_size=_split_sizes(_get(params, "petSize")),
        keyword=_get(params, "keyword"),
        page=_parse_page(_get(params, "page")),
        selected_tour_id=_get(params, "selectedTourId"),
    )


def encode(state: FilterState, keep_defaults: bool = False) -> Dict[str, str]:
    """Serialise a :class:`FilterState` into ordered query parameters."""
    params: Dict[str, str] = {}
    if state.area_code and (keep_defaults
                            or state.area_code != DEFAULT_AREA_CODE):
        params["areaCode"] = state.area_code
    if state.content_type_id:
        params["contentTypeId"] = state.content_type_id
    if state.sort and (keep_defaults or state.sort != DEFAULT_SORT):
        params["sort"] = state.sort
    if state.pet_friendly:
        params["petFriendly"] = "true"
    if state.pet_size:
        params["petSize"] = ",".join(state.pet_size)
    if state.keyword:
        params["keyword"] = state.keyword
    if state.page and (keep_defaults or state.page != DEFAULT_PAGE):
        params["page"] = str(state.page)
    if state.selected_tour_id:
        params["selectedTourId"] = state.selected_tour_id
    return params


def merge(current: FilterState, updates: Mapping[str, Any]) -> FilterState:
    """Overlay ``updates`` (snake_case field names) onto ``current``.

    An explicit empty ``pet_size`` clears the sub-filter instead of leaving an
    empty-but-present selection behind.
    """
    changes = dict(updates)
    if "pet_size" in changes:
        sizes = changes["pet_size"]
        if isinstance(sizes, str):
            changes["pet_size"] = _split_sizes(sizes)
        else:
            changes["pet_size"] = tuple(sizes) if sizes else None
    return dataclasses.replace(current, **changes)


def reset_to_defaults(current: FilterState) -> FilterState:
    """Reset every filter while keeping an active keyword search."""
    return FilterState(keyword=current.keyword)


def parse_query(query: str) -> FilterState:
    """Decode a raw query string (with or without the leading ``?``)."""
    return decode(dict(parse_qsl(query.lstrip("?"))))


def to_query_string(state: FilterState, keep_defaults: bool = False) -> str:
    return urlencode(encode(state, keep_defaults=keep_defaults))


def update_query(current: Mapping[str, Any],
                 updates: Mapping[str, Any]) -> Dict[str, str]:
    """Decode ``current``, apply ``updates`` and re-encode without defaults."""
    return encode(merge(decode(current), updates), keep_defaults=False)


def dedupe_sizes(sizes: Iterable[str]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for size in sizes:
        if size:
            seen.setdefault(size, None)
    return tuple(seen)
