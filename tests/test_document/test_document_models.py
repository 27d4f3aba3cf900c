"""动态文档数据模型单元测试."""

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from indexflow.document.exceptions import (
    FrozenDocumentError,
    InvalidFieldValueError,
    InvalidGeoPointError,
)
from indexflow.document.models import (
    Document,
    FieldValueType,
    GeoPoint,
    infer_value_type,
    normalize_value,
    values_equal,
)


class TestGeoPoint:
    """GeoPoint 数据模型测试."""

    def test_create_point(self) -> None:
        """测试正常坐标点创建."""
        point = GeoPoint(lat=47.678581, lon=-122.131577)
        assert point.lat == 47.678581
        assert point.lon == -122.131577

    def test_lat_out_of_range(self) -> None:
        """测试纬度超出范围."""
        with pytest.raises(InvalidGeoPointError):
            GeoPoint(lat=90.1, lon=0.0)

    def test_lon_out_of_range(self) -> None:
        """测试经度超出范围."""
        with pytest.raises(InvalidGeoPointError):
            GeoPoint(lat=0.0, lon=-180.5)

    def test_to_geojson(self) -> None:
        """测试转换为 GeoJSON（坐标顺序为 lon, lat）."""
        point = GeoPoint(lat=47.678581, lon=-122.131577)
        assert point.to_geojson() == {
            "type": "Point",
            "coordinates": [-122.131577, 47.678581],
        }

    def test_from_geojson(self) -> None:
        """测试从 GeoJSON 解析."""
        point = GeoPoint.from_geojson({"type": "Point", "coordinates": [10.0, 20.0]})
        assert point == GeoPoint(lat=20.0, lon=10.0)

    def test_from_invalid_geojson(self) -> None:
        """测试非法 GeoJSON."""
        with pytest.raises(InvalidGeoPointError):
            GeoPoint.from_geojson({"type": "Polygon", "coordinates": []})
        with pytest.raises(InvalidGeoPointError):
            GeoPoint.from_geojson({"type": "Point", "coordinates": [1.0]})


class TestValueTypes:
    """字段值类型推断与规范化测试."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, FieldValueType.NULL),
            (True, FieldValueType.BOOLEAN),
            (5, FieldValueType.INT64),
            (79.99, FieldValueType.DOUBLE),
            (math.nan, FieldValueType.DOUBLE),
            ("Luxury", FieldValueType.STRING),
            (datetime(2010, 6, 27, tzinfo=UTC), FieldValueType.DATETIME_OFFSET),
            (GeoPoint(lat=1.0, lon=2.0), FieldValueType.GEOGRAPHY_POINT),
            (["pool", "view"], FieldValueType.COLLECTION),
        ],
    )
    def test_infer_value_type(self, value, expected) -> None:
        """测试类型推断."""
        assert infer_value_type(value) is expected

    def test_unsupported_type(self) -> None:
        """测试不支持的类型."""
        with pytest.raises(InvalidFieldValueError):
            infer_value_type({"nested": "object"})

    def test_naive_datetime_normalized_to_utc(self) -> None:
        """测试 naive datetime 规范化为 UTC."""
        value = normalize_value(datetime(2000, 1, 1))
        assert value.tzinfo is UTC
        assert value == datetime(2000, 1, 1, tzinfo=UTC)

    def test_aware_datetime_keeps_offset(self) -> None:
        """测试带偏移的 datetime 保留原偏移."""
        pst = timezone(timedelta(hours=-8))
        value = normalize_value(datetime(2010, 6, 27, tzinfo=pst))
        assert value.utcoffset() == timedelta(hours=-8)

    def test_tuple_becomes_list(self) -> None:
        """测试 tuple 转换为 list."""
        assert normalize_value(("motel", "budget")) == ["motel", "budget"]

    def test_empty_collection(self) -> None:
        """测试空列表."""
        assert normalize_value([]) == []

    def test_mixed_numbers_allowed(self) -> None:
        """测试整数与浮点数可以混合."""
        assert normalize_value([1, 2.5, None]) == [1, 2.5, None]

    def test_heterogeneous_collection_rejected(self) -> None:
        """测试非同构列表."""
        with pytest.raises(InvalidFieldValueError):
            normalize_value(["a", 1])

    def test_nested_collection_rejected(self) -> None:
        """测试嵌套列表."""
        with pytest.raises(InvalidFieldValueError):
            normalize_value([["a"]])

    def test_values_equal_nan(self) -> None:
        """测试 NaN 与 NaN 相等."""
        assert values_equal(math.nan, math.nan)

    def test_values_equal_int_and_float(self) -> None:
        """测试整数与浮点数按数值比较."""
        assert values_equal(4, 4.0)

    def test_values_equal_bool_is_not_number(self) -> None:
        """测试布尔值不与数字相等."""
        assert not values_equal(True, 1)

    def test_values_equal_datetime_instant(self) -> None:
        """测试 datetime 按时间点比较."""
        pst = timezone(timedelta(hours=-8))
        assert values_equal(
            datetime(2010, 6, 27, 0, 0, tzinfo=pst),
            datetime(2010, 6, 27, 8, 0, tzinfo=UTC),
        )


class TestDocument:
    """Document 测试."""

    def test_set_and_get(self) -> None:
        """测试设置与读取字段."""
        doc = Document()
        doc.set("hotelId", "1")
        assert doc.get("hotelId") == "1"
        assert doc["hotelId"] == "1"

    def test_field_names_are_case_sensitive(self) -> None:
        """测试字段名区分大小写."""
        doc = Document({"hotelId": "1", "HotelId": "2"})
        assert len(doc) == 2
        assert doc["hotelId"] == "1"
        assert doc["HotelId"] == "2"

    def test_remove_is_distinct_from_null(self) -> None:
        """测试移除字段与设置为 null 的区别."""
        doc = Document({"hotelId": "1", "description": "Best hotel in town"})
        doc.set("description", None)
        assert "description" in doc
        assert doc["description"] is None

        assert doc.remove("description") is True
        assert "description" not in doc
        assert doc.remove("description") is False

    def test_invalid_field_name(self) -> None:
        """测试非法字段名."""
        with pytest.raises(InvalidFieldValueError):
            Document().set("", "value")

    def test_invalid_value(self) -> None:
        """测试非法字段值."""
        with pytest.raises(InvalidFieldValueError):
            Document({"hotelId": object()})

    def test_insertion_order_preserved(self) -> None:
        """测试保留插入顺序."""
        doc = Document({"b": 1, "a": 2})
        doc["c"] = 3
        assert doc.fields() == ["b", "a", "c"]
        assert list(doc.to_dict()) == ["b", "a", "c"]

    def test_equality_is_order_independent(self) -> None:
        """测试相等性不依赖字段顺序."""
        assert Document({"a": 1, "b": "x"}) == Document({"b": "x", "a": 1})

    def test_equality_requires_same_fields(self) -> None:
        """测试缺失字段与 null 字段不相等."""
        assert Document({"a": 1}) != Document({"a": 1, "b": None})

    def test_equality_with_nan(self) -> None:
        """测试包含 NaN 的文档相等."""
        assert Document({"baseRate": math.nan}) == Document({"baseRate": math.nan})

    def test_copy_is_deep(self) -> None:
        """测试深拷贝."""
        doc = Document({"tags": ["pool", "view"]})
        clone = doc.copy()
        clone["tags"].append("wifi")
        assert doc["tags"] == ["pool", "view"]

    def test_value_type(self) -> None:
        """测试字段值类型标签."""
        doc = Document({"rating": 5, "location": GeoPoint(lat=1.0, lon=2.0)})
        assert doc.value_type("rating") is FieldValueType.INT64
        assert doc.value_type("location") is FieldValueType.GEOGRAPHY_POINT

    def test_kwargs_constructor(self) -> None:
        """测试关键字参数构造."""
        doc = Document(hotelId="1", rating=5)
        assert doc == Document.from_dict({"hotelId": "1", "rating": 5})

    def test_naive_datetime_stored_as_utc(self) -> None:
        """测试文档中的 naive datetime 以 UTC 存储."""
        doc = Document({"PublishDate": datetime(2000, 1, 1)})
        assert doc["PublishDate"] == datetime(2000, 1, 1, tzinfo=UTC)

    def test_frozen_document_rejects_changes(self) -> None:
        """测试只读文档拒绝任何修改."""
        doc = Document({"hotelId": "1", "rating": 4, "tags": ["pool"]}).freeze()

        assert doc.frozen
        with pytest.raises(FrozenDocumentError):
            doc.set("rating", 99)
        with pytest.raises(FrozenDocumentError):
            doc["rating"] = 99
        with pytest.raises(FrozenDocumentError):
            doc.remove("rating")
        with pytest.raises(FrozenDocumentError):
            del doc["rating"]
        with pytest.raises(FrozenDocumentError):
            doc.update({"rating": 99})

        doc["tags"].append("wifi")
        assert doc == Document({"hotelId": "1", "rating": 4, "tags": ["pool"]})

    def test_copy_of_frozen_document_is_mutable(self) -> None:
        """测试只读文档的副本可以修改."""
        doc = Document({"rating": 4}).freeze()
        clone = doc.copy()
        clone.set("rating", 5)
        assert not clone.frozen
        assert doc["rating"] == 4
