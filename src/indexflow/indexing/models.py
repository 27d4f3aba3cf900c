"""批次提交结果数据模型定义模块."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..batch import MAX_BATCH_SIZE, IndexBatch
from ..typing import KeySelector
from .exceptions import IndexingConfigError

# 部分成功时服务端返回的 HTTP 状态码
MULTI_STATUS = 207


class AggregateStatus(str, Enum):
    """批次整体状态.

    Attributes:
        SUCCESS: 全部成功
        MULTI_STATUS: 部分成功（207）
        FAILURE: 请求整体失败
    """

    SUCCESS = "success"
    MULTI_STATUS = "multi_status"
    FAILURE = "failure"

    @classmethod
    def from_status_code(cls, status_code: int) -> AggregateStatus:
        """根据 HTTP 状态码判断整体状态."""
        if status_code == MULTI_STATUS:
            return cls.MULTI_STATUS
        if 200 <= status_code < 300:
            return cls.SUCCESS
        return cls.FAILURE


@dataclass(frozen=True)
class IndexingResult:
    """单个索引操作的结果.

    Attributes:
        key: 文档键
        succeeded: 是否成功
        error_message: 失败原因，成功时为 None
        status_code: 单操作状态码（200 更新、201 创建、404 未找到等）
    """

    key: str
    succeeded: bool
    error_message: str | None = None
    status_code: int = 200


@dataclass(frozen=True)
class TransportResponse:
    """传输层返回的批次响应.

    Attributes:
        results: 与批次操作顺序一致的结果列表；请求整体失败时为空
        status_code: 整体 HTTP 状态码
        message: 请求整体失败时的错误信息
    """

    results: tuple[IndexingResult, ...]
    status_code: int
    message: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", tuple(self.results))

    @property
    def aggregate_status(self) -> AggregateStatus:
        """整体状态."""
        return AggregateStatus.from_status_code(self.status_code)


@dataclass
class DocumentIndexResult:
    """批次提交结果.

    既可表示全部成功，也可表示部分失败（结果类型形式，不依赖异常控制流）。

    Attributes:
        results: 按提交顺序排列的操作结果
        status_code: 整体状态码
        batch: 提交的原始批次
    """

    results: tuple[IndexingResult, ...]
    status_code: int = 200
    batch: IndexBatch[Any] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.results = tuple(self.results)

    @property
    def aggregate_status(self) -> AggregateStatus:
        """整体状态."""
        return AggregateStatus.from_status_code(self.status_code)

    @property
    def failed_results(self) -> list[IndexingResult]:
        """失败的操作结果（保持原有顺序）."""
        return [r for r in self.results if not r.succeeded]

    @property
    def succeeded(self) -> bool:
        """是否全部成功."""
        return not self.failed_results

    @property
    def is_partial_failure(self) -> bool:
        """是否部分失败."""
        return not self.succeeded

    def find_failed_actions_to_retry(
        self, key_selector: KeySelector | None = None
    ) -> IndexBatch[Any]:
        """提取失败操作组成的重试批次，见 find_failed_actions_to_retry."""
        from .retry import find_failed_actions_to_retry

        if self.batch is None:
            return IndexBatch()
        return find_failed_actions_to_retry(self.batch, self.results, key_selector)


@dataclass
class IndexingConfig:
    """批次提交配置.

    Attributes:
        max_batch_size: 单批次最大操作数，默认 1000，必须 >= 1
        raise_on_partial_failure: index() 遇到部分失败时是否抛出 IndexBatchError，
                                  默认 True

    Raises:
        IndexingConfigError: 当参数不合法时抛出

    Examples:
        >>> config = IndexingConfig(max_batch_size=500)
    """

    max_batch_size: int = MAX_BATCH_SIZE
    raise_on_partial_failure: bool = True

    def __post_init__(self) -> None:
        """校验配置参数合法性."""
        if self.max_batch_size < 1:
            raise IndexingConfigError(
                f"max_batch_size 必须 >= 1，当前值: {self.max_batch_size}"
            )
