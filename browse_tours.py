"""CLI entrypoint for browsing tours with My Trip."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List
from urllib.parse import urlencode

from mytrip.api import TourApiClient, resolve_service_key
from mytrip.constants import DEFAULT_AREAS, PET_SIZES
from mytrip.controller import FilterController
from mytrip.errors import TourApiError, describe_error
from mytrip.export import export_tours_to_xlsx
from mytrip.filters import SORT_OPTIONS, encode, parse_query, to_query_string
from mytrip.formatting import format_tour_line, strip_html, truncate_text
from mytrip.maps import (
    DEFAULT_CENTER,
    build_markers,
    calculate_bounds,
    calculate_center,
)
from mytrip.models import AreaCode
from mytrip.pagination import InfiniteTours

logger = logging.getLogger(__name__)

OVERVIEW_LENGTH = 300


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="My Trip tour browser")
    parser.add_argument(
        "--query",
        default=os.getenv("MYTRIP_QUERY", ""),
        help="filter query string, e.g. 'areaCode=6&contentTypeId=39' "
        "(overrides MYTRIP_QUERY env var)",
    )
    parser.add_argument("--area", help="area code ('all' for the default)")
    parser.add_argument("--type", dest="content_type", help="content type id")
    parser.add_argument("--keyword", help="search keyword")
    parser.add_argument("--sort", choices=SORT_OPTIONS, help="result order")
    parser.add_argument(
        "--pet-friendly",
        action="store_true",
        help="only show places that allow pets",
    )
    parser.add_argument(
        "--pet-size",
        action="append",
        default=[],
        choices=[value for value, _ in PET_SIZES],
        help="pet size filter (repeatable, implies --pet-friendly)",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="number of pages to load (first page plus load-more calls)",
    )
    parser.add_argument("--page-size", type=int, default=20, help="rows per page")
    parser.add_argument("--select", help="content id to select on the map")
    parser.add_argument("--detail", metavar="CONTENT_ID", help="show one tour and exit")
    parser.add_argument("--list-areas", action="store_true", help="list area codes and exit")
    parser.add_argument("--export", type=Path, help="write results to an .xlsx file")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def build_controller(args: argparse.Namespace) -> FilterController:
    """Start from the query string and apply flag overrides on top."""
    controller = FilterController(
        navigate=lambda params: logger.debug("Filters now ?%s", urlencode(params)),
        params=encode(parse_query(args.query)),
    )
    if args.area:
        controller.select_area(args.area)
    if args.content_type:
        controller.toggle_content_type(args.content_type, True)
    if args.sort:
        controller.set_sort(args.sort)
    if args.pet_friendly or args.pet_size:
        controller.set_pet_friendly(True)
    for size in args.pet_size:
        controller.toggle_pet_size(size, True)
    if args.keyword:
        controller.search(args.keyword)
    return controller


def load_areas(client: TourApiClient) -> List[AreaCode]:
    try:
        return client.fetch_area_codes()
    except TourApiError as exc:
        logger.warning("Falling back to built-in area list: %s", exc)
        return list(DEFAULT_AREAS)


def show_detail(client: TourApiClient, content_id: str) -> int:
    try:
        item = client.fetch_detail_common(content_id)
    except TourApiError as exc:
        logger.error("관광지 정보를 불러올 수 없습니다: %s", describe_error(exc).message)
        return 1

    try:
        pet_info = {content_id: client.fetch_pet_info(content_id)}
    except TourApiError as exc:
        logger.warning("Pet info unavailable for %s: %s", content_id, exc)
        pet_info = {}

    logger.info("%s", format_tour_line(item, pet_info))
    overview = truncate_text(strip_html(item.overview), OVERVIEW_LENGTH)
    if overview:
        logger.info("%s", overview)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.pages < 1 or args.page_size < 1:
        parser.error("--pages and --page-size must be positive")

    service_key = resolve_service_key()
    if not service_key:
        logger.error("TOUR_API_KEY is not set")
        return 2
    client = TourApiClient(service_key=service_key)

    if args.list_areas:
        for area in load_areas(client):
            logger.info("%s\t%s", area.code, area.name)
        return 0

    if args.detail:
        return show_detail(client, args.detail)

    controller = build_controller(args)
    logger.info("Filters: ?%s", to_query_string(controller.filters))
    for chip in controller.active_filters():
        logger.info("  %s: %s", chip.label, chip.display_value)

    try:
        feed = InfiniteTours.start(client,
                                   lambda: controller.filters,
                                   page_size=args.page_size)
    except TourApiError as exc:
        info = describe_error(exc)
        logger.error("관광지 목록을 불러올 수 없습니다: %s", info.message)
        logger.debug("Original error: %s", info.original_message)
        return 1

    while feed.current_page < args.pages and feed.has_more:
        feed.load_more()
        if feed.error is None:
            continue
        info = describe_error(feed.error)
        logger.warning("다음 페이지를 불러오지 못했습니다: %s", info.message)
        if not info.retryable:
            break
        logger.info("Retrying page %d", feed.current_page + 1)
        feed.load_more()
        if feed.error is not None:
            break
    logger.debug("Feed state: %s", feed.snapshot())

    if not feed.items:
        if controller.filters.pet_friendly:
            logger.info("반려동물 동반 가능한 관광지를 찾을 수 없습니다.")
        elif controller.filters.keyword:
            logger.info('"%s"에 대한 검색 결과가 없습니다.', controller.filters.keyword)
        else:
            logger.info("관광지가 없습니다.")
    for idx, item in enumerate(feed.items, start=1):
        logger.info("%3d. %s", idx, format_tour_line(item, feed.pet_info))
    logger.info(
        "Showing %d item(s) of %d (page %d, more: %s)",
        len(feed.items),
        feed.total_count,
        feed.current_page,
        "yes" if feed.has_more else "no",
    )

    center = calculate_center(list(feed.items)) or DEFAULT_CENTER
    logger.info("Map center: %.6f, %.6f", center.lat, center.lng)
    bounds = calculate_bounds(list(feed.items))
    if bounds is not None:
        logger.info("Map bounds: %.6f, %.6f - %.6f, %.6f", bounds.sw.lat,
                    bounds.sw.lng, bounds.ne.lat, bounds.ne.lng)
    markers = build_markers(feed.items, on_select=controller.select_tour)
    if args.select:
        marker = next((m for m in markers if m.content_id == args.select), None)
        if marker is None:
            logger.warning("No marker for content id %s", args.select)
        else:
            marker.activate()
            logger.info("Selected %s: ?%s", marker.title,
                        to_query_string(controller.filters))

    if args.export:
        path = export_tours_to_xlsx(args.export, feed.items, feed.pet_info)
        logger.info("Exported %d tour(s) to %s", len(feed.items), path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
