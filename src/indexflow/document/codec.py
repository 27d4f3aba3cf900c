"""动态文档线上格式编解码模块.

将 Document 转换为 JSON 兼容的字典（以及反向转换）:
    - datetime -> ISO 8601 字符串，UTC 使用 "Z" 后缀
    - GeoPoint -> GeoJSON Point
    - NaN / +Infinity / -Infinity -> "NaN" / "INF" / "-INF"
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from ..typing import WireDocument
from .exceptions import InvalidFieldValueError
from .models import Document, FieldValueType, GeoPoint, infer_value_type

# 带显式时区偏移的 ISO 8601 时间字符串
_ISO_DATETIME_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,6})?(Z|[+-]\d{2}:\d{2})$"
)

_SPECIAL_FLOATS: dict[str, float] = {
    "NaN": math.nan,
    "INF": math.inf,
    "-INF": -math.inf,
}


def _encode_datetime(value: datetime) -> str:
    if value.utcoffset() == timedelta(0):
        return value.astimezone(UTC).isoformat().replace("+00:00", "Z")
    return value.isoformat()


def _encode_value(value: Any) -> Any:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "INF" if value > 0 else "-INF"
        return value
    if isinstance(value, datetime):
        return _encode_datetime(value)
    if isinstance(value, GeoPoint):
        return value.to_geojson()
    if isinstance(value, list):
        return [_encode_value(item) for item in value]
    return value


def _decode_value(value: Any) -> Any:
    if isinstance(value, str):
        if value in _SPECIAL_FLOATS:
            return _SPECIAL_FLOATS[value]
        if _ISO_DATETIME_PATTERN.match(value):
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return value
    if isinstance(value, Mapping) and value.get("type") == "Point":
        return GeoPoint.from_geojson(value)
    if isinstance(value, list):
        return _decode_list(value)
    return value


def _decode_list(values: list[Any]) -> list[Any]:
    """逐元素解码列表，解码结果类型不一致时原样返回.

    ["2020-01-01T00:00:00Z", "pool"] 这类字符串列表中只有部分元素形如时间或
    特殊浮点数，逐元素解码会得到混合类型，此时整个列表仍按字符串列表处理。
    """
    decoded = [_decode_value(item) for item in values]
    kinds = {_element_kind(item) for item in decoded if item is not None}
    if len(kinds) > 1:
        return list(values)
    return decoded


def _element_kind(value: Any) -> FieldValueType | type:
    if isinstance(value, bool):
        return FieldValueType.BOOLEAN
    if isinstance(value, int | float):
        return FieldValueType.DOUBLE
    try:
        return infer_value_type(value)
    except InvalidFieldValueError:
        return type(value)


def to_wire(document: Document) -> WireDocument:
    """将文档编码为 JSON 兼容字典.

    Args:
        document: 动态文档

    Returns:
        保留字段插入顺序的 JSON 兼容字典
    """
    return {name: _encode_value(value) for name, value in document.items()}


def from_wire(data: Mapping[str, Any]) -> Document:
    """将 JSON 兼容字典解码为文档.

    只有带显式时区偏移的 ISO 8601 字符串会被解析为 datetime，
    其它字符串原样保留。

    Args:
        data: JSON 兼容字典

    Returns:
        动态文档
    """
    return Document({name: _decode_value(value) for name, value in data.items()})
