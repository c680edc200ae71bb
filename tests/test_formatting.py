from openpyxl import load_workbook

from mytrip.export import export_tours_to_xlsx
from mytrip.formatting import (
    content_type_name,
    format_address,
    format_tour_line,
    strip_html,
    truncate_text,
)
from mytrip.models import PetInfo, TourItem

ITEM = TourItem(
    content_id="126508",
    content_type_id="12",
    title="경복궁",
    addr1="서울특별시 종로구 사직로 161",
    mapx="1269769930",
    mapy="375788408",
    tel="02-3700-3900",
    modified_time="20240101120000",
)


def test_content_type_and_address_fallbacks():
    assert content_type_name("39") == "음식점"
    assert content_type_name("99") == "기타"
    assert content_type_name(None) == "기타"
    assert format_address("", "") == "주소 정보 없음"
    assert format_address("서울", "1층") == "서울 1층"
    assert format_address(None, "1층") == "1층"


def test_truncate_and_strip_html():
    assert truncate_text("가나다라마", 3) == "가나다..."
    assert truncate_text("가나", 3) == "가나"
    assert truncate_text(None, 3) == ""
    assert strip_html("<p>조선의 <b>법궁</b></p>") == "조선의 법궁"
    assert strip_html("첫 줄<br>둘째 줄") == "첫 줄\n둘째 줄"
    assert strip_html(None) == ""


def test_format_tour_line_includes_pet_summary():
    pet_info = {"126508": PetInfo(content_id="126508", leash="Y",
                                  size_class="소형", place_class="실외")}
    line = format_tour_line(ITEM, pet_info)
    assert line.startswith("[관광지] 경복궁")
    assert "02-3700-3900" in line
    assert line.endswith("반려동물: 소형견, 실외 가능")
    assert "반려동물" not in format_tour_line(ITEM)


def test_export_tours_to_xlsx(tmp_path):
    pet_info = {"126508": PetInfo(content_id="126508", leash="Y", size_class="소형")}
    broken = TourItem(content_id="2", content_type_id="39", title="식당")

    export_path = export_tours_to_xlsx(tmp_path / "out" / "tours.xlsx",
                                       [ITEM, broken], pet_info)

    assert export_path.exists()
    worksheet = load_workbook(export_path).active
    rows = [[cell.value for cell in row] for row in worksheet.iter_rows()]
    assert rows[0][:3] == ["content_id", "content_type", "title"]
    assert rows[1][0] == "126508"
    assert rows[1][1] == "관광지"
    assert abs(rows[1][5] - 37.5788408) < 1e-9
    assert rows[1][8] == "Y"
    assert rows[1][9] == "소형"
    assert rows[2][2] == "식당"
    assert rows[2][5] is None
