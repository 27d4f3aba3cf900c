"""动态文档数据模型定义模块.

提供字段值类型标签（FieldValueType）、地理坐标点（GeoPoint）和动态文档（Document）。

字段值只允许以下几类:
    - None
    - bool / int / float（float 包含 NaN 与 ±Infinity）
    - str
    - 带时区偏移的 datetime（naive datetime 统一视为 UTC）
    - GeoPoint
    - 由以上标量组成的同构列表
"""

from __future__ import annotations

import copy
import math
from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ..typing import FieldValue
from .exceptions import FrozenDocumentError, InvalidFieldValueError, InvalidGeoPointError


class FieldValueType(str, Enum):
    """字段值类型标签.

    Attributes:
        NULL: 空值
        BOOLEAN: 布尔值
        INT64: 整数
        DOUBLE: 浮点数（含 NaN / Infinity）
        STRING: 字符串
        DATETIME_OFFSET: 带时区偏移的时间
        GEOGRAPHY_POINT: 地理坐标点
        COLLECTION: 同构标量列表
    """

    NULL = "null"
    BOOLEAN = "boolean"
    INT64 = "int64"
    DOUBLE = "double"
    STRING = "string"
    DATETIME_OFFSET = "datetime_offset"
    GEOGRAPHY_POINT = "geography_point"
    COLLECTION = "collection"


@dataclass(frozen=True)
class GeoPoint:
    """地理坐标点数据模型.

    表示一个地理坐标点，包含纬度和经度。
    创建时会自动校验经纬度范围的合法性。

    Attributes:
        lat: 纬度，范围 [-90, 90]
        lon: 经度，范围 [-180, 180]

    Raises:
        InvalidGeoPointError: 当经纬度超出合法范围时抛出

    Examples:
        >>> point = GeoPoint(lat=47.678581, lon=-122.131577)
        >>> point.to_geojson()
        {'type': 'Point', 'coordinates': [-122.131577, 47.678581]}
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        """校验经纬度范围."""
        if not -90 <= self.lat <= 90:
            raise InvalidGeoPointError(f"纬度值 {self.lat} 超出合法范围 [-90, 90]")
        if not -180 <= self.lon <= 180:
            raise InvalidGeoPointError(f"经度值 {self.lon} 超出合法范围 [-180, 180]")

    def to_geojson(self) -> dict[str, Any]:
        """转换为 GeoJSON Point 格式.

        Returns:
            {"type": "Point", "coordinates": [lon, lat]}
        """
        return {"type": "Point", "coordinates": [self.lon, self.lat]}

    @classmethod
    def from_geojson(cls, data: Mapping[str, Any]) -> GeoPoint:
        """从 GeoJSON Point 格式解析坐标点.

        Raises:
            InvalidGeoPointError: 当数据不是合法的 GeoJSON Point 时抛出
        """
        coordinates = data.get("coordinates")
        if data.get("type") != "Point" or not isinstance(coordinates, list | tuple):
            raise InvalidGeoPointError(f"不是合法的 GeoJSON Point: {data}")
        if len(coordinates) != 2:
            raise InvalidGeoPointError(f"GeoJSON Point 坐标必须为 [lon, lat]: {data}")
        lon, lat = coordinates
        return cls(lat=float(lat), lon=float(lon))


def infer_value_type(value: Any) -> FieldValueType:
    """推断字段值的类型标签.

    Raises:
        InvalidFieldValueError: 值不属于支持的字段类型时抛出
    """
    if value is None:
        return FieldValueType.NULL
    # bool 是 int 的子类，必须先判断
    if isinstance(value, bool):
        return FieldValueType.BOOLEAN
    if isinstance(value, int):
        return FieldValueType.INT64
    if isinstance(value, float):
        return FieldValueType.DOUBLE
    if isinstance(value, str):
        return FieldValueType.STRING
    if isinstance(value, datetime):
        return FieldValueType.DATETIME_OFFSET
    if isinstance(value, GeoPoint):
        return FieldValueType.GEOGRAPHY_POINT
    if isinstance(value, list | tuple):
        return FieldValueType.COLLECTION
    raise InvalidFieldValueError(f"不支持的字段值类型: {type(value).__name__}")


def _normalize_scalar(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def normalize_value(value: Any) -> Any:
    """校验并规范化字段值.

    - naive datetime 附加 UTC 时区
    - tuple 转换为 list
    - 列表元素必须为同构标量（int 与 float 可混合，视为 DOUBLE；允许 None 元素）

    Raises:
        InvalidFieldValueError: 值类型不受支持、列表嵌套或元素类型不一致时抛出
    """
    value_type = infer_value_type(value)
    if value_type is not FieldValueType.COLLECTION:
        return _normalize_scalar(value)

    element_type: FieldValueType | None = None
    items = []
    for item in value:
        item_type = infer_value_type(item)
        if item_type is FieldValueType.COLLECTION:
            raise InvalidFieldValueError("不支持嵌套列表字段值")
        if item_type is not FieldValueType.NULL:
            if item_type is FieldValueType.INT64:
                item_type = FieldValueType.DOUBLE
            if element_type is None:
                element_type = item_type
            elif element_type is not item_type:
                raise InvalidFieldValueError(
                    f"列表元素类型不一致: {element_type.value} 与 {item_type.value}"
                )
        items.append(_normalize_scalar(item))
    return items


def values_equal(left: Any, right: Any) -> bool:
    """按字段值语义比较两个值.

    NaN 与 NaN 视为相等；bool 不与数字相等；datetime 按时间点比较；列表逐元素比较。
    """
    left_type = infer_value_type(left)
    right_type = infer_value_type(right)
    numeric = (FieldValueType.INT64, FieldValueType.DOUBLE)
    if left_type in numeric and right_type in numeric:
        if isinstance(left, float) and isinstance(right, float):
            if math.isnan(left) and math.isnan(right):
                return True
        return left == right
    if left_type is not right_type:
        return False
    if left_type is FieldValueType.COLLECTION:
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )
    return left == right


class Document(MutableMapping[str, Any]):
    """动态文档.

    字段名（区分大小写）到字段值的有序映射。插入顺序用于序列化往返，
    但不参与相等性判断：两个文档字段集合相同且各字段值相等即视为相等。

    注意 ``remove(field)`` 与 ``set(field, None)`` 的区别：前者表示字段缺失
    （合并时保持服务端原值），后者表示显式清空。

    调用 ``freeze()`` 后文档变为只读，任何修改都会抛出 FrozenDocumentError，
    读取到的列表值为副本。``copy()`` 返回可修改的副本。

    Examples:
        >>> doc = Document({"hotelId": "1", "rating": 5})
        >>> doc.set("description", None)
        >>> doc.remove("rating")
        True
        >>> "rating" in doc, "description" in doc
        (False, True)
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, fields: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._fields: dict[str, Any] = {}
        self._frozen = False
        if fields is not None:
            for name, value in fields.items():
                self.set(name, value)
        for name, value in kwargs.items():
            self.set(name, value)

    def set(self, field: str, value: FieldValue) -> None:
        """设置字段值（None 表示显式清空）.

        Raises:
            InvalidFieldValueError: 字段名为空或值类型不受支持时抛出
            FrozenDocumentError: 文档为只读时抛出
        """
        self._check_mutable()
        if not isinstance(field, str) or not field:
            raise InvalidFieldValueError(f"字段名必须为非空字符串: {field!r}")
        self._fields[field] = normalize_value(value)

    def remove(self, field: str) -> bool:
        """移除字段，返回字段此前是否存在."""
        self._check_mutable()
        return self._fields.pop(field, _ABSENT) is not _ABSENT

    def freeze(self) -> Document:
        """将文档设为只读并返回自身."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        """文档是否只读."""
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenDocumentError("文档为只读，请先调用 copy() 获取可修改的副本")

    def fields(self) -> list[str]:
        """按插入顺序返回字段名列表."""
        return list(self._fields)

    def value_type(self, field: str) -> FieldValueType:
        """返回字段值的类型标签."""
        return infer_value_type(self._fields[field])

    def copy(self) -> Document:
        """返回可修改的深拷贝（只读文档的副本同样可修改）."""
        new = Document()
        new._fields = copy.deepcopy(self._fields)
        return new

    def to_dict(self) -> dict[str, Any]:
        """转换为普通字典（保留插入顺序）."""
        return copy.deepcopy(self._fields)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Document:
        """从普通字典创建文档."""
        return cls(data)

    def __getitem__(self, field: str) -> FieldValue:
        value = self._fields[field]
        if self._frozen and isinstance(value, list):
            return list(value)
        return value

    def __setitem__(self, field: str, value: Any) -> None:
        self.set(field, value)

    def __delitem__(self, field: str) -> None:
        self._check_mutable()
        del self._fields[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        if self._fields.keys() != other._fields.keys():
            return False
        return all(
            values_equal(value, other._fields[name])
            for name, value in self._fields.items()
        )

    def __repr__(self) -> str:
        return f"Document({self._fields!r})"


_ABSENT = object()
