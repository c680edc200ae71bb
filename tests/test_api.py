from typing import Any, List, Optional

import pytest
import requests

from mytrip.api import TourApiClient, normalize_items, resolve_service_key
from mytrip.errors import (
    ConfigurationError,
    NetworkError,
    ParseError,
    UpstreamError,
)


class DummyResponse:

    def __init__(self, payload: Any = None, status_code: int = 200,
                 text: Optional[str] = None):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if self.text is not None:
            raise ValueError("not json")
        return self.payload


class FakeSession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def envelope(items: Any, total_count: int = 0, result_code: str = "0000",
             result_msg: str = "OK", page_no: int = 1,
             num_of_rows: int = 20) -> dict:
    return {
        "response": {
            "header": {"resultCode": result_code, "resultMsg": result_msg},
            "body": {
                "items": items,
                "totalCount": total_count,
                "pageNo": page_no,
                "numOfRows": num_of_rows,
            },
        }
    }


def make_client(outcomes, sleeps=None) -> TourApiClient:
    sleeps = [] if sleeps is None else sleeps
    return TourApiClient(service_key="test-key",
                         session=FakeSession(outcomes),
                         sleep=sleeps.append)


ROW = {
    "contentid": "126508",
    "contenttypeid": "12",
    "title": "경복궁",
    "addr1": "서울특별시 종로구 사직로 161",
    "mapx": "1269769930",
    "mapy": "375788408",
    "modifiedtime": "20240101120000",
}


def test_normalize_items_accepts_list_object_and_empty():
    assert normalize_items({"items": {"item": [ROW, ROW]}}) == [ROW, ROW]
    assert normalize_items({"items": {"item": ROW}}) == [ROW]
    assert normalize_items({"items": ""}) == []
    assert normalize_items({"items": {"item": ""}}) == []
    assert normalize_items({}) == []


def test_normalize_items_rejects_unexpected_shape():
    with pytest.raises(ParseError):
        normalize_items({"items": {"item": "garbage"}})
    with pytest.raises(ParseError):
        normalize_items("not a body")


def test_browse_by_region_sends_common_params_and_parses_items():
    client = make_client([DummyResponse(envelope({"item": [ROW]}, 42))])

    result = client.browse_by_region("1", content_type_id="12", page_number=2)

    assert result.total_count == 42
    assert [item.title for item in result.items] == ["경복궁"]
    assert result.items[0].content_id == "126508"
    call = client.session.calls[0]
    assert call["url"].endswith("/areaBasedList2")
    assert call["timeout"] == 10
    params = call["params"]
    assert params["serviceKey"] == "test-key"
    assert params["MobileOS"] == "ETC"
    assert params["MobileApp"] == "MyTrip"
    assert params["_type"] == "json"
    assert params["areaCode"] == "1"
    assert params["contentTypeId"] == "12"
    assert params["pageNo"] == "2"
    assert params["numOfRows"] == "20"
    assert "sigunguCode" not in params


def test_single_object_response_is_normalized_to_list():
    client = make_client([DummyResponse(envelope({"item": ROW}, 1))])
    result = client.search_by_keyword("경복궁")
    assert len(result.items) == 1
    assert client.session.calls[0]["params"]["keyword"] == "경복궁"
    assert "areaCode" not in client.session.calls[0]["params"]


def test_non_success_result_code_raises_without_retry():
    sleeps = []
    client = make_client(
        [DummyResponse(envelope("", result_code="0002", result_msg="DB 에러"))],
        sleeps)

    with pytest.raises(UpstreamError) as excinfo:
        client.browse_by_region("1")

    assert excinfo.value.result_code == "0002"
    assert excinfo.value.message == "DB 에러"
    assert sleeps == []


def test_client_error_status_is_not_retried():
    sleeps = []
    body = {"response": {"header": {"resultCode": "30",
                                    "resultMsg": "SERVICE KEY IS NOT REGISTERED"}}}
    client = make_client([DummyResponse(body, status_code=401)], sleeps)

    with pytest.raises(UpstreamError) as excinfo:
        client.browse_by_region("1")

    assert excinfo.value.status_code == 401
    assert "NOT REGISTERED" in excinfo.value.message
    assert len(client.session.calls) == 1
    assert sleeps == []


def test_rate_limit_message():
    client = make_client([DummyResponse(None, status_code=429, text="busy")])
    with pytest.raises(UpstreamError) as excinfo:
        client.browse_by_region("1")
    assert "호출 제한" in excinfo.value.message


def test_server_error_is_retried_with_backoff():
    sleeps = []
    client = make_client([
        DummyResponse(None, status_code=503, text="unavailable"),
        requests.ConnectionError("reset"),
        DummyResponse(envelope({"item": [ROW]}, 1)),
    ], sleeps)

    result = client.browse_by_region("1")

    assert len(result.items) == 1
    assert sleeps == [1, 2]


def test_timeouts_exhaust_retries_then_raise_network_error():
    sleeps = []
    client = make_client([requests.Timeout("slow")] * 4, sleeps)

    with pytest.raises(NetworkError) as excinfo:
        client.browse_by_region("1")

    assert excinfo.value.timeout is True
    assert sleeps == [1, 2, 4]
    assert len(client.session.calls) == 4


def test_malformed_json_is_not_retried():
    sleeps = []
    client = make_client([DummyResponse(text="<OpenAPI_ServiceResponse>")],
                         sleeps)
    with pytest.raises(ParseError):
        client.browse_by_region("1")
    assert sleeps == []


def test_missing_header_is_parse_error():
    client = make_client([DummyResponse({"unexpected": True})])
    with pytest.raises(ParseError):
        client.browse_by_region("1")


def test_fetch_pet_info_returns_record():
    row = {"contentid": "1", "contenttypeid": "12", "chkpetleash": "Y",
           "chkpetsize": "소형", "chkpetplace": "실외"}
    client = make_client([DummyResponse(envelope({"item": row}, 1))])

    info = client.fetch_pet_info("1")

    assert info is not None
    assert info.allows_pets is True
    assert info.size_class == "소형"
    assert info.place_class == "실외"


def test_fetch_pet_info_no_data_code_is_absent():
    client = make_client(
        [DummyResponse(envelope("", result_code="0003", result_msg="NODATA"))])
    assert client.fetch_pet_info("1") is None


def test_fetch_pet_info_empty_items_is_absent():
    client = make_client([DummyResponse(envelope("", 0))])
    assert client.fetch_pet_info("1") is None


def test_fetch_pet_info_other_failures_propagate():
    client = make_client(
        [DummyResponse(envelope("", result_code="0002", result_msg="DB"))])
    with pytest.raises(UpstreamError):
        client.fetch_pet_info("1")


def test_fetch_area_codes():
    rows = [{"code": "1", "name": "서울", "rnum": 1},
            {"code": "6", "name": "부산", "rnum": 6}]
    client = make_client([DummyResponse(envelope({"item": rows}, 2))])
    areas = client.fetch_area_codes()
    assert [(area.code, area.name) for area in areas] == [("1", "서울"),
                                                        ("6", "부산")]


def test_fetch_detail_common_requires_item():
    client = make_client([DummyResponse(envelope("", 0))])
    with pytest.raises(UpstreamError):
        client.fetch_detail_common("1")


def test_missing_service_key_raises_configuration_error():
    client = TourApiClient(service_key="", session=FakeSession([]))
    with pytest.raises(ConfigurationError):
        client.browse_by_region("1")
    assert client.session.calls == []


def test_resolve_service_key_prefers_server_key():
    assert resolve_service_key({"TOUR_API_KEY": "a",
                                "NEXT_PUBLIC_TOUR_API_KEY": "b"}) == "a"
    assert resolve_service_key({"NEXT_PUBLIC_TOUR_API_KEY": " b "}) == "b"
    assert resolve_service_key({}) == ""


def test_service_key_is_not_logged(caplog):
    client = make_client([DummyResponse(envelope({"item": [ROW]}, 1))])
    with caplog.at_level("DEBUG", logger="mytrip.api"):
        client.browse_by_region("1")
    assert "test-key" not in caplog.text
