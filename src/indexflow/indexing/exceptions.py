"""批次提交与结果分类异常定义模块."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ..exceptions import IndexFlowError

if TYPE_CHECKING:
    from ..batch import IndexBatch
    from ..typing import KeySelector
    from .models import AggregateStatus, IndexingResult


class IndexingConfigError(IndexFlowError):
    """索引配置校验异常（批次上限小于 1 等）."""

    pass


class IndexingError(IndexFlowError):
    """批次提交相关基础异常类."""

    pass


class IndexBatchError(IndexingError):
    """批次部分失败异常.

    服务端返回 multi-status（207）且部分操作失败时抛出。携带按提交顺序排列的
    全部操作结果、整体状态码和原始批次，可通过 find_failed_actions_to_retry
    提取只包含失败操作的重试批次。

    Attributes:
        results: 按提交顺序排列的操作结果
        status_code: 整体状态码
        batch: 原始批次
    """

    def __init__(
        self,
        results: Sequence[IndexingResult],
        status_code: int,
        batch: IndexBatch[Any] | None = None,
    ) -> None:
        self.results = tuple(results)
        self.status_code = status_code
        self.batch = batch
        failed = sum(1 for r in self.results if not r.succeeded)
        super().__init__(
            f"批次中 {len(self.results)} 个操作有 {failed} 个失败 "
            f"(status={status_code})，可通过 find_failed_actions_to_retry "
            f"获取重试批次"
        )

    @property
    def aggregate_status(self) -> AggregateStatus:
        """整体状态."""
        from .models import AggregateStatus

        return AggregateStatus.from_status_code(self.status_code)

    @property
    def failed_results(self) -> list[IndexingResult]:
        """失败的操作结果（保持原有顺序）."""
        return [r for r in self.results if not r.succeeded]

    def find_failed_actions_to_retry(
        self,
        original_batch: IndexBatch[Any] | None = None,
        key_selector: KeySelector | None = None,
    ) -> IndexBatch[Any]:
        """从原始批次中提取失败的操作，组成新的重试批次.

        Args:
            original_batch: 原始批次，默认使用异常携带的批次
            key_selector: 动态文档的键字段名或类型化记录的键访问函数，
                          仅用于校验操作与结果的对应关系

        Returns:
            只包含失败操作、保持原有相对顺序的新批次（可能为空）

        Raises:
            RetryBatchMismatchError: 未提供批次或批次与结果数量不一致时抛出
        """
        from .retry import find_failed_actions_to_retry

        batch = original_batch if original_batch is not None else self.batch
        if batch is None:
            raise RetryBatchMismatchError("未提供原始批次，无法提取重试批次")
        return find_failed_actions_to_retry(batch, self.results, key_selector)


class IndexRequestError(IndexingError):
    """批次请求整体失败异常.

    传输层拒绝了整个批次（请求格式错误、认证失败等），此时不存在有意义的
    单操作结果，也不提供重试批次提取。

    Attributes:
        status_code: 传输层状态码
        message: 错误信息
    """

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        self.message = message or "索引请求失败"
        super().__init__(f"[{status_code}] {self.message}")


class RetryBatchMismatchError(IndexingError):
    """重试批次提取时原始批次与结果无法对应的异常."""

    pass
