import datetime as dt
import unicodedata

from mytrip.models import TourItem
from mytrip.sorting import EPOCH, parse_modified_time, sort_tours


def make_item(title: str, modified: str | None) -> TourItem:
    return TourItem(content_id=title, content_type_id="12", title=title,
                    modified_time=modified)


def titles(items):
    return [item.title for item in items]


def test_latest_and_name_ordering():
    items = [
        make_item("가", "20240101000000"),
        make_item("나", None),
        make_item("다", "20240301000000"),
    ]
    assert titles(sort_tours(items, "latest")) == ["다", "가", "나"]
    assert titles(sort_tours(items, "name")) == ["가", "나", "다"]


def test_sort_returns_new_list_without_mutating_input():
    items = [make_item("나", "20240101000000"), make_item("가", "20240201000000")]
    original = list(items)
    result = sort_tours(items, "name")
    assert items == original
    assert result is not items


def test_latest_is_stable_for_ties():
    items = [
        make_item("first", "20240101000000"),
        make_item("second", "20240101000000"),
        make_item("untimed-a", None),
        make_item("untimed-b", ""),
    ]
    assert titles(sort_tours(items, "latest")) == [
        "first", "second", "untimed-a", "untimed-b"
    ]


def test_name_sort_handles_decomposed_hangul():
    decomposed = unicodedata.normalize("NFD", "가람")
    items = [make_item("나무", None), make_item(decomposed, None),
             make_item("다리", None)]
    assert titles(sort_tours(items, "name")) == [decomposed, "나무", "다리"]


def test_unknown_sort_key_falls_back_to_latest():
    items = [make_item("old", "20200101000000"), make_item("new", "20240101000000")]
    assert titles(sort_tours(items, "rating")) == ["new", "old"]


def test_parse_modified_time_formats():
    assert parse_modified_time("20240102030405") == dt.datetime(2024, 1, 2, 3, 4, 5)
    assert parse_modified_time("2024-01-02T03:04:05") == dt.datetime(2024, 1, 2, 3, 4, 5)
    assert parse_modified_time(None) == EPOCH
    assert parse_modified_time("not a date") == EPOCH


def test_name_sort_uses_korean_collation():
    items = [make_item(title, None)
             for title in ("한옥마을", "ＫＴ＆Ｇ 상상마당", "가든", "景福宮",
                           "Banana Cafe", "apple market")]
    assert titles(sort_tours(items, "name")) == [
        "apple market", "Banana Cafe", "ＫＴ＆Ｇ 상상마당", "가든", "景福宮",
        "한옥마을",
    ]
