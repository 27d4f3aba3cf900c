"""索引操作与索引批次模块.

提供四种写入模式的索引操作（IndexAction）以及有序的索引批次（IndexBatch）。
非法的操作（缺少键字段）和非法的批次（空批次、超过上限）在构造时即抛出异常，
不会等到提交阶段。

示例用法:
    >>> from indexflow.batch import IndexAction, IndexBatch
    >>> from indexflow.document import Document
    >>> batch = IndexBatch.new(
    ...     [
    ...         IndexAction.upload(Document({"hotelId": "1"}), key_field="hotelId"),
    ...         IndexAction.delete_key("hotelId", "4"),
    ...     ]
    ... )
"""

from .exceptions import (
    ConstructionError,
    InvalidIndexActionError,
    InvalidIndexBatchError,
)
from .models import (
    DEFAULT_KEY_FIELD,
    MAX_BATCH_SIZE,
    IndexAction,
    IndexActionType,
    IndexBatch,
)

__all__ = [
    # 常量
    "DEFAULT_KEY_FIELD",
    "MAX_BATCH_SIZE",
    # 数据模型
    "IndexActionType",
    "IndexAction",
    "IndexBatch",
    # 异常
    "ConstructionError",
    "InvalidIndexActionError",
    "InvalidIndexBatchError",
]
