"""Spreadsheet export of browsed tours."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Optional

from openpyxl import Workbook

from .formatting import content_type_name, format_address
from .maps import katec_to_wgs84
from .models import PetInfo, TourItem

EXPORT_COLUMNS = (
    "content_id",
    "content_type",
    "title",
    "address",
    "tel",
    "lat",
    "lng",
    "modified_time",
    "pet_leash",
    "pet_size",
    "pet_place",
)


def export_tours_to_xlsx(
    path: Path,
    items: Iterable[TourItem],
    pet_info: Mapping[str, Optional[PetInfo]] | None = None,
) -> Path:
    """Write one row per tour to ``path`` and return it."""
    pet_info = pet_info or {}
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "tours"
    worksheet.append(list(EXPORT_COLUMNS))

    for item in items:
        try:
            position = katec_to_wgs84(item.mapx, item.mapy)
            lat, lng = position.lat, position.lng
        except ValueError:
            lat = lng = None
        info = pet_info.get(item.content_id)
        worksheet.append([
            item.content_id,
            content_type_name(item.content_type_id),
            item.title,
            format_address(item.addr1, item.addr2),
            item.tel or "",
            lat,
            lng,
            item.modified_time or "",
            info.leash if info else "",
            info.size_class if info else "",
            info.place_class if info else "",
        ])

    worksheet.freeze_panes = "A2"
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    return path
