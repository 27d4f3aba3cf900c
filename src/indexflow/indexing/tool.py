"""批次提交核心工具类."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..batch import IndexBatch
from .exceptions import IndexBatchError, IndexRequestError
from .models import (
    AggregateStatus,
    DocumentIndexResult,
    IndexingConfig,
    TransportResponse,
)

if TYPE_CHECKING:
    from ..transport.base import IndexTransport

logger = logging.getLogger(__name__)


class DocumentIndexer:
    """批次提交核心工具类.

    一次提交对应一次请求/响应，不自动重试，也不拆分批次。
    根据整体状态码和单操作结果把响应分类为全部成功、部分失败或请求失败:

    - 全部成功：返回 DocumentIndexResult
    - 部分失败：index() 抛出 IndexBatchError，submit() 返回带失败结果的
      DocumentIndexResult
    - 请求失败：抛出 IndexRequestError，不提供重试批次

    Args:
        transport: 传输层实现
        config: 提交配置，默认使用 IndexingConfig 的默认值

    Example:
        >>> indexer = DocumentIndexer(InMemoryIndexTransport(key_field="hotelId"))
        >>> try:
        ...     indexer.index(batch)
        ... except IndexBatchError as e:
        ...     retry_batch = e.find_failed_actions_to_retry(batch, "hotelId")
    """

    def __init__(
        self,
        transport: IndexTransport,
        config: IndexingConfig | None = None,
    ) -> None:
        self.transport = transport
        self.config = config or IndexingConfig()
        logger.info(
            f"初始化批次提交工具: transport={type(transport).__name__}, "
            f"max_batch_size={self.config.max_batch_size}, "
            f"raise_on_partial_failure={self.config.raise_on_partial_failure}"
        )

    def set_config(
        self,
        max_batch_size: int | None = None,
        raise_on_partial_failure: bool | None = None,
    ) -> None:
        """更新提交配置.

        Args:
            max_batch_size: 单批次最大操作数
            raise_on_partial_failure: index() 遇到部分失败时是否抛出异常
        """
        self.config = IndexingConfig(
            max_batch_size=(
                self.config.max_batch_size
                if max_batch_size is None
                else max_batch_size
            ),
            raise_on_partial_failure=(
                self.config.raise_on_partial_failure
                if raise_on_partial_failure is None
                else raise_on_partial_failure
            ),
        )
        logger.info(
            f"更新配置: max_batch_size={self.config.max_batch_size}, "
            f"raise_on_partial_failure={self.config.raise_on_partial_failure}"
        )

    def _classify(
        self,
        batch: IndexBatch[Any],
        response: TransportResponse,
    ) -> DocumentIndexResult:
        """根据整体状态和单操作结果对响应分类.

        Raises:
            IndexRequestError: 请求整体失败或结果与操作数量不一致时抛出
        """
        status = response.aggregate_status
        if status is AggregateStatus.FAILURE:
            logger.error(
                f"批次请求失败: status={response.status_code}, "
                f"message={response.message}"
            )
            raise IndexRequestError(response.status_code, response.message)

        if len(response.results) != len(batch):
            logger.error(
                f"结果数 {len(response.results)} 与操作数 {len(batch)} 不一致"
            )
            raise IndexRequestError(
                response.status_code,
                f"服务端返回 {len(response.results)} 个结果，"
                f"但批次包含 {len(batch)} 个操作",
            )

        result = DocumentIndexResult(
            results=response.results,
            status_code=response.status_code,
            batch=batch,
        )
        failed = len(result.failed_results)
        if failed:
            if status is AggregateStatus.SUCCESS:
                logger.warning(
                    f"整体状态为 {response.status_code} 但有 {failed} 个操作失败，"
                    f"按部分失败处理"
                )
            else:
                logger.warning(
                    f"批次部分失败: 成功 {len(batch) - failed}, 失败 {failed}"
                )
        elif status is AggregateStatus.MULTI_STATUS:
            logger.warning("整体状态为 207 但全部操作成功，按成功处理")
        else:
            logger.info(f"批次全部成功 ({len(batch)})")
        return result

    def submit(self, batch: IndexBatch[Any]) -> DocumentIndexResult:
        """提交批次并返回分类后的结果，部分失败时不抛出异常.

        Args:
            batch: 索引批次

        Returns:
            批次提交结果，is_partial_failure 表示是否有操作失败

        Raises:
            InvalidIndexBatchError: 批次为空或超过上限时抛出（不会调用传输层）
            IndexRequestError: 请求整体失败时抛出
        """
        batch.validate(self.config.max_batch_size)
        response = self.transport.submit(batch)
        return self._classify(batch, response)

    def index(self, batch: IndexBatch[Any]) -> DocumentIndexResult:
        """提交批次，部分失败时抛出 IndexBatchError.

        Args:
            batch: 索引批次

        Returns:
            全部成功时的批次提交结果

        Raises:
            InvalidIndexBatchError: 批次为空或超过上限时抛出（不会调用传输层）
            IndexBatchError: 部分操作失败时抛出，携带结果和原始批次
            IndexRequestError: 请求整体失败时抛出

        Example:
            >>> batch = IndexBatch.upload([Document({"id": "1"})])
            >>> result = indexer.index(batch)
            >>> result.results[0].succeeded
            True
        """
        result = self.submit(batch)
        if result.is_partial_failure and self.config.raise_on_partial_failure:
            raise IndexBatchError(result.results, result.status_code, batch)
        return result
