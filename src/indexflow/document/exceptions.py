"""动态文档与类型化记录异常定义模块."""

from ..exceptions import IndexFlowError


class DocumentError(IndexFlowError):
    """文档相关基础异常类."""

    pass


class InvalidFieldValueError(DocumentError):
    """无效的字段名或字段值异常（不支持的类型、非同构数组等）."""

    pass


class InvalidGeoPointError(DocumentError):
    """无效的地理坐标点异常（经纬度超出范围）."""

    pass


class TypedRecordError(DocumentError):
    """类型化记录定义异常.

    当记录类型不是 dataclass、缺少键字段或声明了多个键字段时抛出。
    """

    pass


class FrozenDocumentError(DocumentError):
    """修改只读文档异常（索引操作持有的文档在构造后不可修改）."""

    pass
