"""线上格式编解码单元测试."""

import math
from datetime import UTC, datetime, timedelta, timezone

from indexflow.document import Document, GeoPoint, from_wire, to_wire


class TestToWire:
    """to_wire 测试."""

    def test_scalars_unchanged(self) -> None:
        """测试普通标量原样输出."""
        doc = Document({"hotelId": "1", "rating": 5, "parkingIncluded": False})
        assert to_wire(doc) == {"hotelId": "1", "rating": 5, "parkingIncluded": False}

    def test_special_floats(self) -> None:
        """测试 NaN 与 Infinity 编码."""
        doc = Document({"a": math.nan, "b": math.inf, "c": -math.inf, "d": 1.5})
        assert to_wire(doc) == {"a": "NaN", "b": "INF", "c": "-INF", "d": 1.5}

    def test_utc_datetime_uses_z_suffix(self) -> None:
        """测试 UTC 时间使用 Z 后缀."""
        doc = Document({"PublishDate": datetime(2000, 1, 1)})
        assert to_wire(doc) == {"PublishDate": "2000-01-01T00:00:00Z"}

    def test_offset_datetime(self) -> None:
        """测试带偏移时间保留偏移."""
        pst = timezone(timedelta(hours=-8))
        doc = Document({"lastRenovationDate": datetime(2010, 6, 27, tzinfo=pst)})
        assert to_wire(doc) == {"lastRenovationDate": "2010-06-27T00:00:00-08:00"}

    def test_geo_point(self) -> None:
        """测试地理坐标点编码为 GeoJSON."""
        doc = Document({"location": GeoPoint(lat=47.678581, lon=-122.131577)})
        assert to_wire(doc) == {
            "location": {"type": "Point", "coordinates": [-122.131577, 47.678581]}
        }

    def test_null_is_kept(self) -> None:
        """测试显式 null 保留."""
        assert to_wire(Document({"hotelName": None})) == {"hotelName": None}


class TestFromWire:
    """from_wire 测试."""

    def test_decode_datetime_with_offset(self) -> None:
        """测试带偏移的 ISO 字符串解析为 datetime."""
        doc = from_wire({"PublishDate": "2000-01-01T00:00:00Z"})
        assert doc["PublishDate"] == datetime(2000, 1, 1, tzinfo=UTC)
        assert doc["PublishDate"].utcoffset() == timedelta(0)

    def test_plain_date_string_stays_string(self) -> None:
        """测试不带偏移的字符串保持为字符串."""
        doc = from_wire({"note": "2000-01-01"})
        assert doc["note"] == "2000-01-01"

    def test_decode_geo_point(self) -> None:
        """测试 GeoJSON 解析为 GeoPoint."""
        doc = from_wire({"location": {"type": "Point", "coordinates": [2.0, 1.0]}})
        assert doc["location"] == GeoPoint(lat=1.0, lon=2.0)

    def test_decode_special_floats(self) -> None:
        """测试特殊浮点数解析."""
        doc = from_wire({"a": "NaN", "b": "INF", "c": "-INF"})
        assert math.isnan(doc["a"])
        assert doc["b"] == math.inf
        assert doc["c"] == -math.inf

    def test_string_list_with_datetime_like_element(self) -> None:
        """测试部分元素形如时间的字符串列表保持为字符串列表."""
        doc = Document({"tags": ["2020-01-01T00:00:00Z", "pool"]})
        decoded = from_wire(to_wire(doc))
        assert decoded["tags"] == ["2020-01-01T00:00:00Z", "pool"]
        assert decoded == doc

    def test_string_list_with_special_float_element(self) -> None:
        """测试包含 "NaN" 字符串的字符串列表保持为字符串列表."""
        doc = Document({"tags": ["NaN", "pool", None]})
        assert from_wire(to_wire(doc)) == doc

    def test_homogeneous_lists_are_decoded(self) -> None:
        """测试元素类型一致的列表逐元素解码."""
        doc = from_wire(
            {"scores": ["NaN", 1.5, 2], "dates": ["2000-01-01T00:00:00Z", None]}
        )
        assert math.isnan(doc["scores"][0])
        assert doc["scores"][1:] == [1.5, 2]
        assert doc["dates"] == [datetime(2000, 1, 1, tzinfo=UTC), None]

    def test_round_trip(self) -> None:
        """测试编码后解码得到相等的文档."""
        pst = timezone(timedelta(hours=-8))
        doc = Document(
            {
                "hotelId": "1",
                "baseRate": math.nan,
                "tags": ["pool", "view", "wifi", "concierge"],
                "lastRenovationDate": datetime(2010, 6, 27, tzinfo=pst),
                "location": GeoPoint(lat=47.678581, lon=-122.131577),
                "description": None,
            }
        )
        assert from_wire(to_wire(doc)) == doc
