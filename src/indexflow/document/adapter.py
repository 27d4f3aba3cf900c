"""类型化记录适配器模块.

将 dataclass 定义的类型化记录与动态文档（Document）互相转换。

使用示例:
    >>> from dataclasses import dataclass
    >>> from indexflow.document import TypedDocumentAdapter, document_field
    >>>
    >>> @dataclass
    ... class Hotel:
    ...     hotel_id: str | None = document_field(name="hotelId", key=True, default=None)
    ...     rating: int | None = None
    >>>
    >>> adapter = TypedDocumentAdapter(Hotel)
    >>> adapter.to_document(Hotel(hotel_id="1", rating=5))
    Document({'hotelId': '1', 'rating': 5})
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from .exceptions import TypedRecordError
from .models import Document

T = TypeVar("T")

# dataclass 字段 metadata 中使用的键
FIELD_NAME = "indexflow.name"
FIELD_KEY = "indexflow.key"
FIELD_NULLABLE = "indexflow.nullable"

# 未显式声明键字段时按名称识别的候选字段（不区分大小写）
_IMPLICIT_KEY_NAMES = ("id", "key")


def document_field(
    name: str | None = None,
    key: bool = False,
    nullable: bool = False,
    **kwargs: Any,
) -> Any:
    """声明类型化记录字段的文档映射信息.

    对 ``dataclasses.field`` 的包装，其余关键字参数原样传递。

    Args:
        name: 文档中的字段名（保留声明时的大小写），默认使用属性名
        key: 是否为索引键字段
        nullable: 为 True 时，值为 None 的字段会以显式 null 写入文档，
                  否则值为 None 的字段在写入时被省略
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[FIELD_KEY] = key
    metadata[FIELD_NULLABLE] = nullable
    if name is not None:
        metadata[FIELD_NAME] = name
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class _FieldMapping:
    attribute: str
    wire_name: str
    key: bool
    nullable: bool
    init: bool


class TypedDocumentAdapter(Generic[T]):
    """类型化记录与 Document 之间的转换器.

    - 写入：按声明顺序输出字段，字段名使用声明的大小写；值为 None 的字段被省略，
      除非字段声明为 nullable；naive datetime 统一规范化为 UTC
    - 读取：字段名不区分大小写匹配，记录上不存在的文档字段被丢弃，
      文档中缺失的字段使用 dataclass 默认值

    Args:
        record_type: dataclass 记录类型

    Raises:
        TypedRecordError: 记录类型不是 dataclass、字段名冲突或键字段声明不合法时抛出
    """

    _cache: ClassVar[dict[type, TypedDocumentAdapter[Any]]] = {}

    def __init__(self, record_type: type[T]) -> None:
        if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
            raise TypedRecordError(f"类型化记录必须是 dataclass 类型: {record_type!r}")
        self.record_type = record_type
        self._mappings = [
            _FieldMapping(
                attribute=f.name,
                wire_name=f.metadata.get(FIELD_NAME, f.name),
                key=bool(f.metadata.get(FIELD_KEY, False)),
                nullable=bool(f.metadata.get(FIELD_NULLABLE, False)),
                init=f.init,
            )
            for f in dataclasses.fields(record_type)
        ]

        self._by_lower_name: dict[str, _FieldMapping] = {}
        for mapping in self._mappings:
            lowered = mapping.wire_name.lower()
            if lowered in self._by_lower_name:
                raise TypedRecordError(
                    f"{record_type.__name__} 中字段名 '{mapping.wire_name}' "
                    f"与 '{self._by_lower_name[lowered].wire_name}' 仅大小写不同"
                )
            self._by_lower_name[lowered] = mapping

        self._key = self._resolve_key()

    @classmethod
    def for_type(cls, record_type: type[T]) -> TypedDocumentAdapter[T]:
        """获取（并缓存）指定记录类型的适配器."""
        adapter = cls._cache.get(record_type)
        if adapter is None:
            adapter = cls(record_type)
            cls._cache[record_type] = adapter
        return adapter

    def _resolve_key(self) -> _FieldMapping:
        declared = [m for m in self._mappings if m.key]
        if len(declared) > 1:
            names = ", ".join(m.attribute for m in declared)
            raise TypedRecordError(
                f"{self.record_type.__name__} 声明了多个键字段: {names}"
            )
        if declared:
            return declared[0]

        for name in _IMPLICIT_KEY_NAMES:
            mapping = self._by_lower_name.get(name)
            if mapping is not None:
                return mapping
        raise TypedRecordError(
            f"{self.record_type.__name__} 未声明键字段，"
            f"请使用 document_field(key=True) 标记"
        )

    @property
    def key_field(self) -> str:
        """键字段在文档中的字段名."""
        return self._key.wire_name

    def key_of(self, record: T) -> Any:
        """读取记录的键值（未做空值校验）."""
        return getattr(record, self._key.attribute)

    def to_document(self, record: T) -> Document:
        """将类型化记录转换为 Document.

        Raises:
            TypedRecordError: record 不是该适配器的记录类型时抛出
        """
        if not isinstance(record, self.record_type):
            raise TypedRecordError(
                f"期望 {self.record_type.__name__} 类型的记录，"
                f"实际为 {type(record).__name__}"
            )
        document = Document()
        for mapping in self._mappings:
            value = getattr(record, mapping.attribute)
            if value is None and not mapping.nullable:
                continue
            document.set(mapping.wire_name, value)
        return document

    def from_document(self, document: Document) -> T:
        """将 Document 转换为类型化记录.

        Raises:
            TypedRecordError: 文档缺少记录的必填字段时抛出
        """
        kwargs: dict[str, Any] = {}
        for name, value in document.items():
            mapping = self._by_lower_name.get(name.lower())
            if mapping is None or not mapping.init:
                continue
            kwargs[mapping.attribute] = value
        try:
            return self.record_type(**kwargs)
        except TypeError as e:
            raise TypedRecordError(
                f"无法从文档构造 {self.record_type.__name__}: {e}"
            ) from e
