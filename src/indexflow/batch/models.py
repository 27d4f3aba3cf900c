"""索引操作与索引批次数据模型定义模块."""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from ..document import Document, TypedDocumentAdapter
from .exceptions import InvalidIndexActionError, InvalidIndexBatchError

T = TypeVar("T")

# 服务端单批次允许的最大操作数
MAX_BATCH_SIZE = 1000

# 动态文档未指定键字段时使用的字段名
DEFAULT_KEY_FIELD = "id"


class IndexActionType(str, Enum):
    """索引操作类型枚举.

    Attributes:
        UPLOAD: 整体写入（不存在则创建，存在则完全覆盖）
        MERGE: 部分更新，文档不存在时失败
        MERGE_OR_UPLOAD: 文档存在则部分更新，否则按给定字段创建
        DELETE: 按键删除文档
    """

    UPLOAD = "upload"
    MERGE = "merge"
    MERGE_OR_UPLOAD = "mergeOrUpload"
    DELETE = "delete"


def _validate_key_field(key_field: Any) -> None:
    if not isinstance(key_field, str) or not key_field:
        raise InvalidIndexActionError(f"键字段名必须为非空字符串: {key_field!r}")


def _resolve_key(document: Any, key_field: str | None) -> tuple[str, Any]:
    """返回 (键字段名, 原始键值)."""
    if key_field is not None:
        _validate_key_field(key_field)

    if isinstance(document, Document):
        resolved = DEFAULT_KEY_FIELD if key_field is None else key_field
        return resolved, document.get(resolved)

    if dataclasses.is_dataclass(document) and not isinstance(document, type):
        adapter = TypedDocumentAdapter.for_type(type(document))
        if key_field is not None and key_field != adapter.key_field:
            raise InvalidIndexActionError(
                f"{type(document).__name__} 的键字段为 '{adapter.key_field}'，"
                f"与指定的 '{key_field}' 不一致"
            )
        return adapter.key_field, adapter.key_of(document)

    raise InvalidIndexActionError(
        f"索引操作的文档必须是 Document 或 dataclass 记录，"
        f"实际为 {type(document).__name__}"
    )


def _validate_key(value: Any, key_field: str) -> str:
    if value is None:
        raise InvalidIndexActionError(f"文档缺少键字段 '{key_field}' 或键值为 null")
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise InvalidIndexActionError(
            f"键字段 '{key_field}' 的值必须是字符串，实际为 {type(value).__name__}"
        )
    key = str(value)
    if not key:
        raise InvalidIndexActionError(f"键字段 '{key_field}' 的值不能为空")
    return key


@dataclass(frozen=True)
class IndexAction(Generic[T]):
    """索引操作数据类.

    包装一个文档（Document 或 dataclass 记录）及其写入模式。构造时立即校验键字段，
    并对文档做深拷贝，之后调用方对原文档的修改不会影响已构造的操作。
    Document 的深拷贝被设为只读，需要修改时使用 to_document() 获取副本。

    Attributes:
        action_type: 操作类型
        document: 文档（构造时的深拷贝，Document 为只读）
        key_field: 键字段名；Document 默认为 "id"，dataclass 记录取自其键字段声明
        key: 键值（字符串形式）

    Raises:
        InvalidIndexActionError: 键字段名为空，或键值缺失、为 null 或为空时抛出

    Examples:
        >>> action = IndexAction.merge(Document({"hotelId": "3", "rating": None}), key_field="hotelId")
        >>> action.key
        '3'
    """

    action_type: IndexActionType
    document: T
    key_field: str | None = None
    key: str = field(init=False, compare=False)

    def __post_init__(self) -> None:
        document: Any = self.document
        if isinstance(document, Mapping) and not isinstance(document, Document):
            document = Document(document)
        key_field, raw_key = _resolve_key(document, self.key_field)
        key = _validate_key(raw_key, key_field)
        object.__setattr__(self, "action_type", IndexActionType(self.action_type))
        document = copy.deepcopy(document)
        if isinstance(document, Document):
            document.freeze()
        object.__setattr__(self, "document", document)
        object.__setattr__(self, "key_field", key_field)
        object.__setattr__(self, "key", key)

    @classmethod
    def upload(cls, document: T, key_field: str | None = None) -> IndexAction[T]:
        """创建 UPLOAD 操作：文档中省略的字段在服务端视为缺失（整体覆盖）."""
        return cls(IndexActionType.UPLOAD, document, key_field)

    @classmethod
    def merge(cls, document: T, key_field: str | None = None) -> IndexAction[T]:
        """创建 MERGE 操作.

        非 null 字段覆盖服务端值，显式 null 字段清空服务端值，
        缺失字段保持不变，数组整体替换。文档不存在时该操作失败。
        """
        return cls(IndexActionType.MERGE, document, key_field)

    @classmethod
    def merge_or_upload(
        cls, document: T, key_field: str | None = None
    ) -> IndexAction[T]:
        """创建 MERGE_OR_UPLOAD 操作：文档存在则合并，否则按给定字段创建."""
        return cls(IndexActionType.MERGE_OR_UPLOAD, document, key_field)

    @classmethod
    def delete(cls, document: T, key_field: str | None = None) -> IndexAction[T]:
        """创建 DELETE 操作：只使用文档的键字段，其它字段被服务端忽略."""
        return cls(IndexActionType.DELETE, document, key_field)

    @classmethod
    def delete_key(cls, key_name: str, key_value: str) -> IndexAction[Document]:
        """按键字段名和键值创建 DELETE 操作."""
        _validate_key_field(key_name)
        return cls(IndexActionType.DELETE, Document({key_name: key_value}), key_name)

    @property
    def is_typed(self) -> bool:
        """文档是否为 dataclass 记录."""
        return not isinstance(self.document, Document)

    def to_document(self) -> Document:
        """返回操作文档的 Document 形式（可修改的副本）."""
        if not self.is_typed:
            return self.document.copy()
        return TypedDocumentAdapter.for_type(type(self.document)).to_document(
            self.document
        )


class IndexBatch(Generic[T]):
    """索引批次.

    有序、可追加的索引操作序列。不去重、不重排，批次内允许出现重复键；
    批次顺序在提交和结果关联过程中始终保持不变。

    Args:
        actions: 初始操作列表
        max_size: 批次大小上限，默认为 1000

    Raises:
        InvalidIndexBatchError: 元素不是 IndexAction 或超过批次大小上限时抛出

    Examples:
        >>> batch = IndexBatch.upload(
        ...     [Document({"hotelId": "1"}), Document({"hotelId": "2"})],
        ...     key_field="hotelId",
        ... )
        >>> batch.add(IndexAction.delete_key("hotelId", "4"))
        >>> [a.key for a in batch]
        ['1', '2', '4']
    """

    def __init__(
        self,
        actions: Iterable[IndexAction[T]] | None = None,
        max_size: int = MAX_BATCH_SIZE,
    ) -> None:
        if max_size < 1:
            raise InvalidIndexBatchError(f"max_size 必须 >= 1，当前值: {max_size}")
        self.max_size = max_size
        self._actions: list[IndexAction[T]] = []
        if actions is not None:
            self.extend(actions)

    # ------------------------------------------------------------------
    # 构造
    # ------------------------------------------------------------------

    @classmethod
    def new(
        cls,
        actions: Iterable[IndexAction[T]],
        max_size: int = MAX_BATCH_SIZE,
    ) -> IndexBatch[T]:
        """创建并立即校验批次（空批次视为构造错误）."""
        batch = cls(actions, max_size=max_size)
        batch.validate()
        return batch

    @classmethod
    def upload(
        cls, documents: Iterable[T], key_field: str | None = None
    ) -> IndexBatch[T]:
        """创建全部为 UPLOAD 操作的批次."""
        return cls.new(IndexAction.upload(doc, key_field) for doc in documents)

    @classmethod
    def merge(
        cls, documents: Iterable[T], key_field: str | None = None
    ) -> IndexBatch[T]:
        """创建全部为 MERGE 操作的批次."""
        return cls.new(IndexAction.merge(doc, key_field) for doc in documents)

    @classmethod
    def merge_or_upload(
        cls, documents: Iterable[T], key_field: str | None = None
    ) -> IndexBatch[T]:
        """创建全部为 MERGE_OR_UPLOAD 操作的批次."""
        return cls.new(IndexAction.merge_or_upload(doc, key_field) for doc in documents)

    @classmethod
    def delete(
        cls, documents: Iterable[T], key_field: str | None = None
    ) -> IndexBatch[T]:
        """创建全部为 DELETE 操作的批次."""
        return cls.new(IndexAction.delete(doc, key_field) for doc in documents)

    # ------------------------------------------------------------------
    # 追加与校验
    # ------------------------------------------------------------------

    def add(self, action: IndexAction[T]) -> None:
        """在批次末尾追加一个操作.

        Raises:
            InvalidIndexBatchError: action 不是 IndexAction 或批次已满时抛出
        """
        if not isinstance(action, IndexAction):
            raise InvalidIndexBatchError(
                f"批次元素必须是 IndexAction，实际为 {type(action).__name__}"
            )
        if len(self._actions) >= self.max_size:
            raise InvalidIndexBatchError(
                f"批次操作数不能超过 {self.max_size}"
            )
        self._actions.append(action)

    def extend(self, actions: Iterable[IndexAction[T]]) -> None:
        """按顺序追加多个操作."""
        for action in actions:
            self.add(action)

    def validate(self, max_size: int | None = None) -> None:
        """校验批次可以提交.

        Args:
            max_size: 批次大小上限，默认使用批次自身的 max_size

        Raises:
            InvalidIndexBatchError: 批次为空或超过上限时抛出
        """
        limit = self.max_size if max_size is None else max_size
        if not self._actions:
            raise InvalidIndexBatchError("索引批次至少需要包含一个操作")
        if len(self._actions) > limit:
            raise InvalidIndexBatchError(
                f"批次操作数 {len(self._actions)} 超过上限 {limit}"
            )

    # ------------------------------------------------------------------
    # 访问
    # ------------------------------------------------------------------

    @property
    def actions(self) -> tuple[IndexAction[T], ...]:
        """按提交顺序返回操作序列."""
        return tuple(self._actions)

    def keys(self) -> list[str]:
        """按顺序返回每个操作的键."""
        return [action.key for action in self._actions]

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[IndexAction[T]]:
        return iter(self.actions)

    def __getitem__(self, index: int) -> IndexAction[T]:
        return self._actions[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexBatch):
            return NotImplemented
        return self._actions == other._actions

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        summary = ", ".join(
            f"{a.action_type.value}({a.key})" for a in self._actions[:10]
        )
        if len(self._actions) > 10:
            summary += f", ... and {len(self._actions) - 10} more"
        return f"IndexBatch([{summary}])"
