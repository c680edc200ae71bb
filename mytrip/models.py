"""Core data models for My Trip."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence


def _text(row: Mapping, key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(row: Mapping, key: str) -> Optional[str]:
    value = _text(row, key)
    return value or None


@dataclass(frozen=True)
class TourItem:
    """Represents one attraction returned by the tourism content API."""

    content_id: str
    content_type_id: str
    title: str
    addr1: str = ""
    addr2: str = ""
    area_code: Optional[str] = None
    sigungu_code: Optional[str] = None
    mapx: str = ""
    mapy: str = ""
    first_image: Optional[str] = None
    first_image2: Optional[str] = None
    tel: Optional[str] = None
    modified_time: Optional[str] = None
    created_time: Optional[str] = None
    overview: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping) -> "TourItem":
        """Build an item from a raw ``areaBasedList2``/``searchKeyword2`` row."""
        return cls(
            content_id=_text(row, "contentid"),
            content_type_id=_text(row, "contenttypeid"),
            title=_text(row, "title"),
            addr1=_text(row, "addr1"),
            addr2=_text(row, "addr2"),
            area_code=_optional_text(row, "areacode"),
            sigungu_code=_optional_text(row, "sigungucode"),
            mapx=_text(row, "mapx"),
            mapy=_text(row, "mapy"),
            first_image=_optional_text(row, "firstimage"),
            first_image2=_optional_text(row, "firstimage2"),
            tel=_optional_text(row, "tel"),
            modified_time=_optional_text(row, "modifiedtime"),
            created_time=_optional_text(row, "createdtime"),
            overview=_optional_text(row, "overview"),
        )


@dataclass(frozen=True)
class PetInfo:
    """Pet companion details for a single attraction (``detailPetTour2``)."""

    content_id: str
    content_type_id: str = ""
    leash: Optional[str] = None
    size_class: Optional[str] = None
    place_class: Optional[str] = None
    fee: Optional[str] = None
    notes: Optional[str] = None

    @property
    def allows_pets(self) -> bool:
        return self.leash == "Y"

    @classmethod
    def from_row(cls, row: Mapping) -> "PetInfo":
        return cls(
            content_id=_text(row, "contentid"),
            content_type_id=_text(row, "contenttypeid"),
            leash=_optional_text(row, "chkpetleash"),
            size_class=_optional_text(row, "chkpetsize"),
            place_class=_optional_text(row, "chkpetplace"),
            fee=_optional_text(row, "chkpetfee"),
            notes=_optional_text(row, "petinfo"),
        )


@dataclass(frozen=True)
class AreaCode:
    """Region identifier and display name."""

    code: str
    name: str


@dataclass(frozen=True)
class TourListResult:
    """Raw page returned by a region browse or keyword search call."""

    items: List[TourItem]
    total_count: int
    page_no: int = 1
    num_of_rows: int = 0


@dataclass(frozen=True)
class TourPage:
    """One processed page: enriched, post-filtered and sorted."""

    items: Sequence[TourItem]
    pet_info: Mapping[str, Optional[PetInfo]]
    total_count: int
    page_no: int
    page_size: int

    @property
    def has_more(self) -> bool:
        return self.page_no * self.page_size < self.total_count
