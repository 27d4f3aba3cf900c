"""批次提交与结果分类模块.

把索引批次提交给传输层，按整体状态码和单操作结果对响应分类，
并在部分失败时提供重试批次提取。

主要组件:
    - DocumentIndexer: 批次提交工具
    - DocumentIndexResult: 批次提交结果（成功或部分失败）
    - IndexingResult: 单操作结果
    - find_failed_actions_to_retry: 重试批次提取（纯函数）
    - IndexBatchError: 部分失败异常
    - IndexRequestError: 请求整体失败异常

使用示例:
    from indexflow.indexing import DocumentIndexer, IndexBatchError

    indexer = DocumentIndexer(transport)
    try:
        indexer.index(batch)
    except IndexBatchError as e:
        retry_batch = e.find_failed_actions_to_retry(batch, "hotelId")
"""

from .exceptions import (
    IndexBatchError,
    IndexingConfigError,
    IndexingError,
    IndexRequestError,
    RetryBatchMismatchError,
)
from .models import (
    MULTI_STATUS,
    AggregateStatus,
    DocumentIndexResult,
    IndexingConfig,
    IndexingResult,
    TransportResponse,
)
from .retry import find_failed_actions_to_retry
from .tool import DocumentIndexer

__all__ = [
    # 工具
    "DocumentIndexer",
    "find_failed_actions_to_retry",
    # 数据模型
    "MULTI_STATUS",
    "AggregateStatus",
    "DocumentIndexResult",
    "IndexingConfig",
    "IndexingResult",
    "TransportResponse",
    # 异常
    "IndexingError",
    "IndexingConfigError",
    "IndexBatchError",
    "IndexRequestError",
    "RetryBatchMismatchError",
]
