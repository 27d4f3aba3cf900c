"""索引批次传输层模块.

主要组件:
    - IndexTransport: 传输层抽象基类（submit(batch) -> TransportResponse）
    - ElasticsearchTransport: 基于 Elasticsearch bulk API 的实现
    - InMemoryIndexTransport: 内存实现，模拟服务端写入语义

使用示例:
    from elasticsearch import Elasticsearch
    from indexflow.transport import ElasticsearchTransport

    transport = ElasticsearchTransport(Elasticsearch("http://localhost:9200"), "hotels")
"""

from .base import IndexTransport
from .es import ElasticsearchTransport
from .memory import DOCUMENT_NOT_FOUND, MISSING_KEY, InMemoryIndexTransport

__all__ = [
    "IndexTransport",
    "ElasticsearchTransport",
    "InMemoryIndexTransport",
    "DOCUMENT_NOT_FOUND",
    "MISSING_KEY",
]
