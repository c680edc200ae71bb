"""Coordinate projection and marker helpers for the map view."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from .models import TourItem

logger = logging.getLogger(__name__)

COORDINATE_SCALE = 10_000_000


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


@dataclass(frozen=True)
class Bounds:
    sw: LatLng
    ne: LatLng


# Seoul City Hall, used when there is nothing to centre on.
DEFAULT_CENTER = LatLng(lat=37.5665, lng=126.9780)


def katec_to_wgs84(mapx: str, mapy: str) -> LatLng:
    """Convert the API's integer-scaled ``mapx``/``mapy`` pair to lat/lng."""
    return LatLng(lat=float(mapy) / COORDINATE_SCALE,
                  lng=float(mapx) / COORDINATE_SCALE)


def _coordinates(items: Iterable[TourItem]) -> List[LatLng]:
    points: List[LatLng] = []
    for item in items:
        try:
            points.append(katec_to_wgs84(item.mapx, item.mapy))
        except ValueError:
            logger.warning("Skipping %s: invalid coordinates (%r, %r)",
                           item.content_id, item.mapx, item.mapy)
    return points


def calculate_center(items: Sequence[TourItem]) -> Optional[LatLng]:
    points = _coordinates(items)
    if not points:
        return None
    return LatLng(
        lat=sum(point.lat for point in points) / len(points),
        lng=sum(point.lng for point in points) / len(points),
    )


def calculate_bounds(items: Sequence[TourItem]) -> Optional[Bounds]:
    points = _coordinates(items)
    if not points:
        return None
    lats = [point.lat for point in points]
    lngs = [point.lng for point in points]
    return Bounds(sw=LatLng(lat=min(lats), lng=min(lngs)),
                  ne=LatLng(lat=max(lats), lng=max(lngs)))


@dataclass(frozen=True)
class MapMarker:
    """One marker on the map; activating it reports the item's id."""

    content_id: str
    title: str
    address: str
    position: LatLng
    on_select: Callable[[str], None]

    def activate(self) -> None:
        self.on_select(self.content_id)


def build_markers(items: Iterable[TourItem],
                  on_select: Callable[[str], None]) -> List[MapMarker]:
    """Create a marker per item, skipping items without usable coordinates."""
    markers: List[MapMarker] = []
    for item in items:
        try:
            position = katec_to_wgs84(item.mapx, item.mapy)
        except ValueError:
            logger.warning("No marker for %s: invalid coordinates",
                           item.content_id)
            continue
        markers.append(
            MapMarker(
                content_id=item.content_id,
                title=item.title,
                address=item.addr1,
                position=position,
                on_select=on_select,
            ))
    return markers
