"""Client for the Korea Tourism Organization content API (KorService2)."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urljoin

import requests

from .errors import (
    ConfigurationError,
    NetworkError,
    ParseError,
    TourApiError,
    UpstreamError,
)
from .models import AreaCode, PetInfo, TourItem, TourListResult

logger = logging.getLogger(__name__)

BASE_URL = "https://apis.data.go.kr/B551011/KorService2/"
COMMON_PARAMS = {
    "MobileOS": "ETC",
    "MobileApp": "MyTrip",
    "_type": "json",
}
REQUEST_TIMEOUT = 10
BACKOFF_SECONDS: Tuple[float, ...] = (1, 2, 4)
DEFAULT_PAGE_SIZE = 20
SUCCESS_CODE = "0000"
NO_DATA_CODE = "0003"
SERVICE_KEY_ENV_VARS = ("TOUR_API_KEY", "NEXT_PUBLIC_TOUR_API_KEY")


def resolve_service_key(environ: Mapping[str, str] | None = None) -> str:
    """Return the first configured service key, or an empty string."""
    env = os.environ if environ is None else environ
    for name in SERVICE_KEY_ENV_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return ""


def normalize_items(body: Any) -> List[dict]:
    """Return the ``items.item`` rows of a response body as a list.

    The API sends a list when there are several rows, a bare object when there
    is one, and an empty string (or nothing) when there are none.
    """
    if not isinstance(body, dict):
        raise ParseError(f"Unexpected response body: {body!r}")
    items = body.get("items")
    if items is None or items == "":
        return []
    if isinstance(items, dict):
        items = items.get("item")
        if items is None or items == "":
            return []
    if isinstance(items, dict):
        return [items]
    if isinstance(items, list) and all(isinstance(row, dict) for row in items):
        return list(items)
    raise ParseError(f"Unexpected items payload: {items!r}")


def _header(payload: Any) -> Optional[dict]:
    if not isinstance(payload, dict):
        return None
    response = payload.get("response")
    if not isinstance(response, dict):
        return None
    header = response.get("header")
    return header if isinstance(header, dict) else None


def _body(payload: dict) -> dict:
    body = payload["response"].get("body")
    if body is None or body == "":
        return {}
    if not isinstance(body, dict):
        raise ParseError(f"Unexpected response body: {body!r}")
    return body


def parse_list_response(payload: dict) -> Tuple[List[dict], int, int, int]:
    """Extract rows, ``totalCount``, ``pageNo`` and ``numOfRows``."""
    body = _body(payload)
    rows = normalize_items(body) if body else []
    return (
        rows,
        _safe_int(body.get("totalCount"), default=len(rows)),
        _safe_int(body.get("pageNo"), default=1),
        _safe_int(body.get("numOfRows"), default=len(rows)),
    )


class TourApiClient:
    """Wrapper around the KorService2 endpoints with timeout and retry."""

    def __init__(self,
                 service_key: str | None = None,
                 session: requests.Session | None = None,
                 timeout: float = REQUEST_TIMEOUT,
                 backoff: Sequence[float] = BACKOFF_SECONDS,
                 sleep: Callable[[float], None] = time.sleep,
                 base_url: str = BASE_URL):
        self.service_key = (resolve_service_key()
                            if service_key is None else service_key)
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "MyTrip/1.0",
            "Accept": "application/json",
        })
        self.timeout = timeout
        self.backoff = tuple(backoff)
        self.sleep = sleep
        self.base_url = base_url

    def build_params(self, params: Mapping[str, Any]) -> Dict[str, str]:
        if not self.service_key:
            raise ConfigurationError("API 키가 설정되지 않았습니다.")
        merged: Dict[str, str] = dict(COMMON_PARAMS)
        merged["serviceKey"] = self.service_key
        for key, value in params.items():
            if value is None:
                continue
            merged[key] = str(value)
        return merged

    def get(self, endpoint: str, params: Mapping[str, Any]) -> dict:
        """Call ``endpoint`` and return the decoded, successful payload.

        Timeouts, connection failures and 5xx answers are retried with the
        configured backoff; everything else is raised on the first failure.
        """
        url = urljoin(self.base_url, endpoint)
        query = self.build_params(params)
        attempt = 0
        while True:
            try:
                return self._request_once(url, query)
            except TourApiError as exc:
                if not exc.retriable or attempt >= len(self.backoff):
                    raise
                delay = self.backoff[attempt]
                attempt += 1
                logger.warning(
                    "Request to %s failed (%s); retry %d/%d in %ss",
                    endpoint,
                    exc,
                    attempt,
                    len(self.backoff),
                    delay,
                )
                self.sleep(delay)

    def _request_once(self, url: str, query: Dict[str, str]) -> dict:
        logger.debug(
            "GET %s %s",
            url,
            {k: v for k, v in query.items() if k != "serviceKey"},
        )
        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.Timeout as exc:
            raise NetworkError("요청 시간이 초과되었습니다.",
                               timeout=True) from exc
        except requests.RequestException as exc:
            raise NetworkError(
                "네트워크 오류가 발생했습니다. 인터넷 연결을 확인해주세요.") from exc

        status = response.status_code
        if status >= 400:
            raise _status_error(response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError("응답을 해석할 수 없습니다.", status_code=status) from exc

        header = _header(payload)
        if header is None:
            raise ParseError(f"Missing response header: {payload!r}",
                             status_code=status)
        result_code = str(header.get("resultCode") or "")
        if result_code != SUCCESS_CODE:
            raise UpstreamError(
                header.get("resultMsg") or f"API 요청 실패 ({result_code})",
                status_code=status,
                result_code=result_code,
            )
        return payload

    def fetch_area_codes(self, page_size: int = 100) -> List[AreaCode]:
        payload = self.get("areaCode2", {"numOfRows": page_size, "pageNo": 1})
        rows, _, _, _ = parse_list_response(payload)
        return [
            AreaCode(code=str(row.get("code", "")), name=str(row.get("name", "")))
            for row in rows
        ]

    def browse_by_region(self,
                         area_code: str,
                         content_type_id: str | None = None,
                         page_size: int = DEFAULT_PAGE_SIZE,
                         page_number: int = 1,
                         sigungu_code: str | None = None) -> TourListResult:
        """List attractions for a region (``areaBasedList2``)."""
        payload = self.get(
            "areaBasedList2",
            {
                "areaCode": area_code,
                "contentTypeId": content_type_id,
                "numOfRows": page_size,
                "pageNo": page_number,
                "sigunguCode": sigungu_code,
            },
        )
        return _list_result(payload)

    def search_by_keyword(self,
                          keyword: str,
                          area_code: str | None = None,
                          content_type_id: str | None = None,
                          page_size: int = DEFAULT_PAGE_SIZE,
                          page_number: int = 1) -> TourListResult:
        """Free-text search (``searchKeyword2``)."""
        payload = self.get(
            "searchKeyword2",
            {
                "keyword": keyword,
                "areaCode": area_code,
                "contentTypeId": content_type_id,
                "numOfRows": page_size,
                "pageNo": page_number,
            },
        )
        return _list_result(payload)

    def fetch_pet_info(self, content_id: str) -> Optional[PetInfo]:
        """Pet companion details, or ``None`` when the API has no record."""
        try:
            payload = self.get("detailPetTour2", {"contentId": content_id})
        except UpstreamError as exc:
            if exc.result_code == NO_DATA_CODE:
                logger.debug("No pet info for %s", content_id)
                return None
            raise
        rows, _, _, _ = parse_list_response(payload)
        if not rows:
            return None
        return PetInfo.from_row(rows[0])

    def fetch_detail_common(self, content_id: str) -> TourItem:
        payload = self.get("detailCommon2", {"contentId": content_id})
        rows, _, _, _ = parse_list_response(payload)
        if not rows:
            raise UpstreamError("관광지 정보를 찾을 수 없습니다.")
        return TourItem.from_row(rows[0])


def _list_result(payload: dict) -> TourListResult:
    rows, total_count, page_no, num_of_rows = parse_list_response(payload)
    return TourListResult(
        items=[TourItem.from_row(row) for row in rows],
        total_count=total_count,
        page_no=page_no,
        num_of_rows=num_of_rows,
    )


def _status_error(response: requests.Response) -> UpstreamError:
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = None
    header = _header(body)
    if header and header.get("resultMsg"):
        return UpstreamError(
            header["resultMsg"],
            status_code=status,
            result_code=str(header.get("resultCode") or "") or None,
        )
    if status == 429:
        return UpstreamError(
            "API 호출 제한에 도달했습니다. 잠시 후 다시 시도해주세요.", status_code=status)
    if status >= 500:
        return UpstreamError("서버 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
                             status_code=status)
    return UpstreamError(f"API 요청 실패 ({status})", status_code=status)


def _safe_int(value: Any, default: int = 0) -> int:
    try:
        return int(value) if value is not None and value != "" else default
    except (TypeError, ValueError):
        return default
