"""动态文档模块.

提供动态文档、字段值类型标签、地理坐标点、线上格式编解码和类型化记录适配器。

主要组件:
    - Document: 字段名到字段值的有序映射
    - FieldValueType: 字段值类型标签
    - GeoPoint: 地理坐标点
    - TypedDocumentAdapter: dataclass 记录与 Document 之间的转换器
    - to_wire / from_wire: JSON 兼容格式编解码

使用示例:
    from indexflow.document import Document, GeoPoint

    doc = Document({"hotelId": "1", "location": GeoPoint(lat=47.67, lon=-122.13)})
"""

from .adapter import TypedDocumentAdapter, document_field
from .codec import from_wire, to_wire
from .exceptions import (
    DocumentError,
    FrozenDocumentError,
    InvalidFieldValueError,
    InvalidGeoPointError,
    TypedRecordError,
)
from .models import (
    Document,
    FieldValueType,
    GeoPoint,
    infer_value_type,
    normalize_value,
    values_equal,
)

__all__ = [
    # 数据模型
    "Document",
    "FieldValueType",
    "GeoPoint",
    "infer_value_type",
    "normalize_value",
    "values_equal",
    # 适配器
    "TypedDocumentAdapter",
    "document_field",
    # 编解码
    "to_wire",
    "from_wire",
    # 异常
    "DocumentError",
    "FrozenDocumentError",
    "InvalidFieldValueError",
    "InvalidGeoPointError",
    "TypedRecordError",
]
