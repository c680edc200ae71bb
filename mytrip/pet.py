"""Pet companion helpers: eligibility checks and display labels."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from .models import PetInfo

SIZE_LABELS: Dict[str, str] = {
    "소형": "소형견",
    "중형": "중형견",
    "대형": "대형견",
    "소형견": "소형견",
    "중형견": "중형견",
    "대형견": "대형견",
    "소": "소형견",
    "중": "중형견",
    "대": "대형견",
}

PLACE_LABELS: Dict[str, str] = {
    "실내": "실내 가능",
    "실외": "실외 가능",
    "실내외": "실내/실외 가능",
    "실내,실외": "실내/실외 가능",
    "실외,실내": "실내/실외 가능",
}


def is_pet_friendly(pet_info: Optional[PetInfo]) -> bool:
    """A missing record is treated exactly like "pets not allowed"."""
    return pet_info is not None and pet_info.allows_pets


def matches_pet_size_filter(pet_info: Optional[PetInfo],
                            filter_sizes: Iterable[str]) -> bool:
    """Check the size class against the requested size tokens.

    Tokens match when either string contains the other, ignoring case, so a
    record saying ``"소형"`` satisfies a ``"소형견"`` request and vice versa.
    """
    if not is_pet_friendly(pet_info):
        return False
    sizes = [size for size in filter_sizes if size]
    if not sizes:
        return True
    size_class = pet_info.size_class
    if not size_class:
        return False
    normalized = size_class.lower()
    for size in sizes:
        token = size.lower()
        if token in normalized or normalized in token:
            return True
    return False


def pet_size_label(size: Optional[str]) -> str:
    if not size:
        return "제한 없음"
    if size in SIZE_LABELS:
        return SIZE_LABELS[size]
    lowered = size.lower()
    for key, label in SIZE_LABELS.items():
        if key in lowered:
            return label
    return size


def pet_place_label(place: Optional[str]) -> str:
    if not place:
        return "정보 없음"
    if place in PLACE_LABELS:
        return PLACE_LABELS[place]
    indoor = "실내" in place
    outdoor = "실외" in place
    if indoor and outdoor:
        return "실내/실외 가능"
    if indoor:
        return "실내 가능"
    if outdoor:
        return "실외 가능"
    return place


def pet_info_summary(pet_info: Optional[PetInfo]) -> str:
    """Short text such as ``"소형견, 실내/실외 가능"``; empty when not allowed."""
    if not is_pet_friendly(pet_info):
        return ""
    parts = []
    if pet_info.size_class:
        parts.append(pet_size_label(pet_info.size_class))
    if pet_info.place_class:
        parts.append(pet_place_label(pet_info.place_class))
    return ", ".join(parts)
