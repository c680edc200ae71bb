"""Text helpers used when presenting tours."""

from __future__ import annotations

from typing import Mapping, Optional

from bs4 import BeautifulSoup

from .constants import CONTENT_TYPES
from .models import PetInfo, TourItem
from .pet import pet_info_summary


def content_type_name(content_type_id: Optional[str]) -> str:
    return CONTENT_TYPES.get(content_type_id or "", "기타")


def format_address(addr1: Optional[str], addr2: Optional[str] = None) -> str:
    if not addr1 and not addr2:
        return "주소 정보 없음"
    if addr1 and addr2:
        return f"{addr1} {addr2}"
    return addr1 or addr2 or ""


def truncate_text(text: Optional[str], max_length: int) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


def strip_html(markup: Optional[str]) -> str:
    """Drop tags from ``overview`` text, turning ``<br>`` into newlines."""
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    return soup.get_text().strip()


def format_tour_line(
    item: TourItem,
    pet_info: Mapping[str, Optional[PetInfo]] | None = None,
) -> str:
    """Single-line summary: type, title, address, phone and pet details."""
    parts = [
        f"[{content_type_name(item.content_type_id)}] {item.title}",
        format_address(item.addr1, item.addr2),
    ]
    if item.tel:
        parts.append(item.tel)
    if pet_info:
        summary = pet_info_summary(pet_info.get(item.content_id))
        if summary:
            parts.append(f"반려동물: {summary}")
    return " | ".join(parts)
