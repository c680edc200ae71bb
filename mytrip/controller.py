"""Translate filter interactions into query-string navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from .constants import CONTENT_TYPES, SORT_LABELS, area_name
from .filters import (
    DEFAULT_AREA_CODE,
    DEFAULT_PAGE,
    DEFAULT_SORT,
    FilterState,
    decode,
    dedupe_sizes,
    encode,
    reset_to_defaults,
    update_query,
)
from .models import AreaCode
from .pet import pet_size_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveFilter:
    """A removable filter chip."""

    key: str
    label: str
    value: str
    display_value: str


class FilterController:
    """Holds the current query parameters and pushes changes to ``navigate``."""

    def __init__(self,
                 navigate: Callable[[Dict[str, str]], None],
                 params: Mapping[str, Any] | None = None,
                 areas: List[AreaCode] | None = None):
        self.navigate = navigate
        self.params: Dict[str, str] = encode(decode(params or {}))
        self.areas = areas

    @property
    def filters(self) -> FilterState:
        return decode(self.params)

    def _push(self, params: Dict[str, str]) -> Dict[str, str]:
        self.params = params
        logger.debug("Navigating with %s", params)
        self.navigate(params)
        return params

    def update(self, **updates: Any) -> Dict[str, str]:
        """Apply filter updates; any filter change returns to page 1."""
        updates["page"] = DEFAULT_PAGE
        return self._push(update_query(self.params, updates))

    def select_area(self, area_code: str) -> Dict[str, str]:
        if area_code == "all":
            area_code = DEFAULT_AREA_CODE
        return self.update(area_code=area_code)

    def toggle_content_type(self, type_id: str, checked: bool) -> Dict[str, str]:
        # Single-valued: the most recently checked type replaces the previous.
        return self.update(content_type_id=type_id if checked else None)

    def set_sort(self, sort: str) -> Dict[str, str]:
        return self.update(sort=sort)

    def set_pet_friendly(self, checked: bool) -> Dict[str, str]:
        if checked:
            return self.update(pet_friendly=True)
        return self.update(pet_friendly=False, pet_size=None)

    def toggle_pet_size(self, size: str, checked: bool) -> Dict[str, str]:
        current = self.filters.pet_size or ()
        if checked:
            sizes = dedupe_sizes((*current, size))
        else:
            sizes = tuple(value for value in current if value != size)
        return self.update(pet_size=sizes)

    def search(self, keyword: str) -> Dict[str, str]:
        return self.update(keyword=keyword.strip() or None)

    def clear_search(self) -> Dict[str, str]:
        return self.update(keyword=None)

    def remove_filter(self, key: str) -> Dict[str, str]:
        if key == "areaCode":
            return self.update(area_code=DEFAULT_AREA_CODE)
        if key == "contentTypeId":
            return self.update(content_type_id=None)
        if key == "sort":
            return self.update(sort=DEFAULT_SORT)
        if key == "petFriendly":
            return self.update(pet_friendly=False, pet_size=None)
        if key == "petSize":
            return self.update(pet_size=None)
        raise ValueError(f"Unknown filter: {key}")

    def reset_filters(self) -> Dict[str, str]:
        return self._push(encode(reset_to_defaults(self.filters)))

    def select_tour(self, content_id: Optional[str]) -> Dict[str, str]:
        """Mark a tour as selected without touching the page."""
        return self._push(
            update_query(self.params, {"selected_tour_id": content_id}))

    def active_filters(self) -> List[ActiveFilter]:
        filters = self.filters
        chips: List[ActiveFilter] = []
        if filters.area_code != DEFAULT_AREA_CODE:
            chips.append(
                ActiveFilter(
                    key="areaCode",
                    label="지역",
                    value=filters.area_code,
                    display_value=area_name(filters.area_code, self.areas)
                    or "알 수 없음",
                ))
        if filters.content_type_id:
            chips.append(
                ActiveFilter(
                    key="contentTypeId",
                    label="관광 타입",
                    value=filters.content_type_id,
                    display_value=CONTENT_TYPES.get(filters.content_type_id,
                                                    "알 수 없음"),
                ))
        if filters.sort != DEFAULT_SORT:
            chips.append(
                ActiveFilter(key="sort",
                             label="정렬",
                             value=filters.sort,
                             display_value=SORT_LABELS[filters.sort]))
        if filters.pet_friendly:
            chips.append(
                ActiveFilter(key="petFriendly",
                             label="반려동물",
                             value="true",
                             display_value="동반 가능"))
        if filters.pet_size:
            chips.append(
                ActiveFilter(
                    key="petSize",
                    label="반려동물 크기",
                    value=",".join(filters.pet_size),
                    display_value=", ".join(
                        pet_size_label(size) for size in filters.pet_size),
                ))
        return chips

    def active_filter_count(self) -> int:
        filters = self.filters
        count = sum(1 for chip in self.active_filters()
                    if chip.key != "petSize")
        if filters.pet_friendly and filters.pet_size:
            count += 1
        return count
