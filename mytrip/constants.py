"""Static catalogues shared by the filters, the CLI and display helpers."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .models import AreaCode

# Fallback when areaCode2 cannot be reached.
DEFAULT_AREAS: List[AreaCode] = [
    AreaCode(code="1", name="서울"),
    AreaCode(code="2", name="인천"),
    AreaCode(code="3", name="대전"),
    AreaCode(code="4", name="대구"),
    AreaCode(code="5", name="광주"),
    AreaCode(code="6", name="부산"),
    AreaCode(code="7", name="울산"),
    AreaCode(code="8", name="세종"),
    AreaCode(code="31", name="경기"),
    AreaCode(code="32", name="강원"),
    AreaCode(code="33", name="충북"),
    AreaCode(code="34", name="충남"),
    AreaCode(code="35", name="경북"),
    AreaCode(code="36", name="경남"),
    AreaCode(code="37", name="전북"),
    AreaCode(code="38", name="전남"),
    AreaCode(code="39", name="제주"),
]

CONTENT_TYPES: Dict[str, str] = {
    "12": "관광지",
    "14": "문화시설",
    "15": "축제/행사",
    "25": "여행코스",
    "28": "레포츠",
    "32": "숙박",
    "38": "쇼핑",
    "39": "음식점",
}

# (query value, display label)
PET_SIZES: Tuple[Tuple[str, str], ...] = (
    ("소형", "소형견"),
    ("중형", "중형견"),
    ("대형", "대형견"),
)

SORT_LABELS: Dict[str, str] = {
    "latest": "최신순",
    "name": "이름순",
}


def area_name(code: str, areas: List[AreaCode] | None = None) -> str | None:
    """Look up a region name, defaulting to the built-in catalogue."""
    for area in areas or DEFAULT_AREAS:
        if area.code == code:
            return area.name
    return None
