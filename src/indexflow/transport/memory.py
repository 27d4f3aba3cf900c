"""内存索引传输层模块.

在内存中模拟服务端对索引批次的处理，实现与服务端一致的写入语义，
主要用于测试和本地开发。
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..batch import IndexActionType, IndexBatch
from ..document import Document, from_wire, to_wire
from ..indexing.models import MULTI_STATUS, IndexingResult, TransportResponse
from ..typing import WireDocument
from .base import IndexTransport

logger = logging.getLogger(__name__)

DOCUMENT_NOT_FOUND = "Document not found."
MISSING_KEY = "Document key cannot be missing or empty."


class InMemoryIndexTransport(IndexTransport):
    """内存索引传输层.

    写入语义:
        - UPLOAD: 整体覆盖，文档中省略的字段在存储中不存在；新建返回 201，覆盖返回 200
        - MERGE: 非 null 字段覆盖，显式 null 字段清空，缺失字段保持不变，数组整体替换；
          文档不存在时该操作失败（404 "Document not found."）
        - MERGE_OR_UPLOAD: 文档存在则按 MERGE 处理，否则按 UPLOAD 处理
        - DELETE: 删除文档；文档不存在时是否成功由 delete_missing_succeeds 决定

    批次中任一文档缺少索引键字段时，整个请求以 400 失败。

    Args:
        key_field: 索引键字段名，默认为 "id"
        delete_missing_succeeds: 删除不存在的文档是否视为成功，默认为 True

    Examples:
        >>> transport = InMemoryIndexTransport(key_field="hotelId")
        >>> indexer = DocumentIndexer(transport)
        >>> indexer.index(IndexBatch.upload([Document({"hotelId": "1"})], key_field="hotelId"))
        >>> transport.count()
        1
    """

    def __init__(
        self,
        key_field: str = "id",
        delete_missing_succeeds: bool = True,
    ) -> None:
        self.key_field = key_field
        self.delete_missing_succeeds = delete_missing_succeeds
        self.submit_count = 0
        self._store: dict[str, WireDocument] = {}

    def submit(self, batch: IndexBatch[Any]) -> TransportResponse:
        """按顺序处理批次中的全部操作."""
        self.submit_count += 1

        wire_documents: list[WireDocument] = []
        for position, action in enumerate(batch):
            wire = to_wire(action.to_document())
            key = wire.get(self.key_field)
            if key is None or key == "":
                logger.error(f"第 {position} 个操作缺少键字段 '{self.key_field}'")
                return TransportResponse(
                    results=(),
                    status_code=400,
                    message=(
                        f"The request is invalid. Details: actions : "
                        f"{position}: {MISSING_KEY}"
                    ),
                )
            wire_documents.append(wire)

        results = [
            self._apply(action.action_type, wire)
            for action, wire in zip(batch, wire_documents)
        ]
        status_code = 200 if all(r.succeeded for r in results) else MULTI_STATUS
        return TransportResponse(results=tuple(results), status_code=status_code)

    def _apply(self, action_type: IndexActionType, wire: WireDocument) -> IndexingResult:
        key = str(wire[self.key_field])
        exists = key in self._store

        if action_type is IndexActionType.UPLOAD:
            self._store[key] = copy.deepcopy(wire)
            return IndexingResult(key, True, status_code=200 if exists else 201)

        if action_type is IndexActionType.MERGE:
            if not exists:
                return IndexingResult(key, False, DOCUMENT_NOT_FOUND, 404)
            self._store[key].update(copy.deepcopy(wire))
            return IndexingResult(key, True, status_code=200)

        if action_type is IndexActionType.MERGE_OR_UPLOAD:
            if exists:
                self._store[key].update(copy.deepcopy(wire))
                return IndexingResult(key, True, status_code=200)
            self._store[key] = copy.deepcopy(wire)
            return IndexingResult(key, True, status_code=201)

        # DELETE
        if exists:
            del self._store[key]
            return IndexingResult(key, True, status_code=200)
        if self.delete_missing_succeeds:
            return IndexingResult(key, True, status_code=200)
        return IndexingResult(key, False, DOCUMENT_NOT_FOUND, 404)

    def get(self, key: str) -> Document | None:
        """按键读取已存储的文档，不存在时返回 None."""
        wire = self._store.get(str(key))
        if wire is None:
            return None
        return from_wire(wire)

    def count(self) -> int:
        """返回已存储的文档数."""
        return len(self._store)
