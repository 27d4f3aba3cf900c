"""indexflow - 搜索索引批量写入与部分失败恢复工具包.

构建包含上传、合并、合并或上传、删除四种写入模式的索引批次，提交给传输层，
对混合结果进行分类，并在部分失败时提取只包含失败操作的重试批次。

主要功能:
    - Document / TypedDocumentAdapter: 动态文档与类型化记录
    - IndexAction / IndexBatch: 索引操作与索引批次
    - DocumentIndexer: 批次提交与结果分类
    - find_failed_actions_to_retry: 重试批次提取

使用示例:
    from indexflow import Document, DocumentIndexer, IndexAction, IndexBatch, IndexBatchError

    batch = IndexBatch.new(
        [
            IndexAction.upload(Document({"hotelId": "1", "rating": 5}), key_field="hotelId"),
            IndexAction.merge(Document({"hotelId": "3", "rating": None}), key_field="hotelId"),
        ]
    )
    try:
        indexer.index(batch)
    except IndexBatchError as e:
        retry_batch = e.find_failed_actions_to_retry(batch, "hotelId")
"""

__version__ = "0.1.0"

# 导出索引操作与批次
from indexflow.batch import (
    ConstructionError,
    IndexAction,
    IndexActionType,
    IndexBatch,
    InvalidIndexActionError,
    InvalidIndexBatchError,
)

# 导出文档模型
from indexflow.document import (
    Document,
    FieldValueType,
    GeoPoint,
    TypedDocumentAdapter,
    document_field,
)

# 导出异常
from indexflow.exceptions import IndexFlowError

# 导出提交工具
from indexflow.indexing import (
    AggregateStatus,
    DocumentIndexer,
    DocumentIndexResult,
    IndexBatchError,
    IndexingConfig,
    IndexingResult,
    IndexRequestError,
    find_failed_actions_to_retry,
)

# 导出传输层
from indexflow.transport import (
    ElasticsearchTransport,
    IndexTransport,
    InMemoryIndexTransport,
)

__all__ = [
    # 版本
    "__version__",
    # 文档
    "Document",
    "FieldValueType",
    "GeoPoint",
    "TypedDocumentAdapter",
    "document_field",
    # 操作与批次
    "IndexActionType",
    "IndexAction",
    "IndexBatch",
    # 提交
    "DocumentIndexer",
    "DocumentIndexResult",
    "IndexingConfig",
    "IndexingResult",
    "AggregateStatus",
    "find_failed_actions_to_retry",
    # 传输层
    "IndexTransport",
    "ElasticsearchTransport",
    "InMemoryIndexTransport",
    # 异常
    "IndexFlowError",
    "ConstructionError",
    "InvalidIndexActionError",
    "InvalidIndexBatchError",
    "IndexBatchError",
    "IndexRequestError",
]
