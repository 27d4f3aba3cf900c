"""Elasticsearch 传输层模块.

使用 Elasticsearch bulk API 提交索引批次，操作映射关系:
    - UPLOAD -> index
    - MERGE -> update（doc）
    - MERGE_OR_UPLOAD -> update（doc + doc_as_upsert）
    - DELETE -> delete
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, TransportError
from elasticsearch.exceptions import ConnectionError as ESConnectionError

from ..batch import IndexAction, IndexActionType, IndexBatch
from ..document import to_wire
from ..indexing.models import MULTI_STATUS, IndexingResult, TransportResponse
from .base import IndexTransport

logger = logging.getLogger(__name__)

# 未收到 HTTP 响应（连接失败、超时）时使用的状态码
UNAVAILABLE_STATUS = 503


class ElasticsearchTransport(IndexTransport):
    """Elasticsearch 传输层.

    一个批次对应一次 bulk 请求。文档键作为 _id，文档内容经 to_wire 编码。
    ES 对单个失败操作仍返回 200，此时根据响应中的 errors 标志将整体状态
    视为 207（部分成功）。删除不存在的文档时 ES 返回 not_found 且不带 error，
    按成功处理。

    Args:
        es_client: Elasticsearch 客户端实例
        index_name: 目标索引名称
        refresh: bulk 请求的 refresh 参数（True / False / "wait_for"），默认不传

    Examples:
        >>> transport = ElasticsearchTransport(Elasticsearch("http://localhost:9200"), "hotels")
        >>> indexer = DocumentIndexer(transport)
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        index_name: str,
        refresh: bool | str | None = None,
    ) -> None:
        self.es_client = es_client
        self.index_name = index_name
        self.refresh = refresh
        logger.info(
            f"初始化 Elasticsearch 传输层: index={index_name}, refresh={refresh}"
        )

    def _prepare_operations(self, action: IndexAction[Any]) -> list[dict[str, Any]]:
        """准备单个索引操作对应的 bulk 行.

        Args:
            action: 索引操作

        Returns:
            bulk 请求中的元数据行（以及文档行）
        """
        meta = {"_id": action.key}
        if action.action_type is IndexActionType.DELETE:
            return [{"delete": meta}]

        source = to_wire(action.to_document())
        if action.action_type is IndexActionType.UPLOAD:
            return [{"index": meta}, source]

        body: dict[str, Any] = {"doc": source}
        if action.action_type is IndexActionType.MERGE_OR_UPLOAD:
            body["doc_as_upsert"] = True
        return [{"update": meta}, body]

    def _parse_item(self, action: IndexAction[Any], item: dict[str, Any]) -> IndexingResult:
        """将 bulk 响应中的单个条目转换为 IndexingResult."""
        # 条目格式: {"update": {"_id": "1", "status": 404, "error": {...}}}
        info = next(iter(item.values()), {})
        key = str(info.get("_id", action.key))
        status = info.get("status", 200)
        error = info.get("error")
        if error is None:
            return IndexingResult(key, True, status_code=status)

        if not isinstance(error, dict):
            return IndexingResult(key, False, str(error), status)

        message = error.get("reason") or error.get("type") or "unknown error"
        caused_by = error.get("caused_by")
        if isinstance(caused_by, dict):
            message += f" (caused by {caused_by.get('type', '')}: {caused_by.get('reason', '')})"
        return IndexingResult(key, False, message, status)

    def submit(self, batch: IndexBatch[Any]) -> TransportResponse:
        """通过 bulk API 提交批次."""
        operations: list[dict[str, Any]] = []
        for action in batch:
            operations.extend(self._prepare_operations(action))

        kwargs: dict[str, Any] = {"index": self.index_name, "operations": operations}
        if self.refresh is not None:
            kwargs["refresh"] = self.refresh

        try:
            response = self.es_client.bulk(**kwargs)
        except ApiError as e:
            logger.error(f"bulk 请求被拒绝: {e}")
            return TransportResponse(
                results=(),
                status_code=e.meta.status,
                message=getattr(e, "message", None) or str(e),
            )
        except (ESConnectionError, TransportError) as e:
            logger.error(f"bulk 请求未收到响应: {e}")
            return TransportResponse(
                results=(),
                status_code=UNAVAILABLE_STATUS,
                message=getattr(e, "message", None) or str(e),
            )

        body = getattr(response, "body", response)
        items = body.get("items", [])
        results = tuple(
            self._parse_item(action, item) for action, item in zip(batch, items)
        )
        if len(items) != len(batch):
            logger.warning(f"bulk 响应条目数 {len(items)} 与操作数 {len(batch)} 不一致")

        status_code = MULTI_STATUS if body.get("errors") else 200
        return TransportResponse(results=results, status_code=status_code)
