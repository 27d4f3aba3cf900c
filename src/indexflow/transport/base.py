"""传输层接口定义模块."""

from abc import ABC, abstractmethod
from typing import Any

from ..batch import IndexBatch
from ..indexing.models import TransportResponse


class IndexTransport(ABC):
    """索引批次传输层抽象基类.

    实现类负责把整个批次作为一个请求发送给服务端，并返回与批次操作
    顺序一致的结果列表和整体状态码。传输层不做重试、不拆分批次。
    请求被整体拒绝时返回 results 为空、status_code 为错误码的响应，
    而不是抛出异常。
    """

    @abstractmethod
    def submit(self, batch: IndexBatch[Any]) -> TransportResponse:
        """提交批次.

        Args:
            batch: 已校验的索引批次

        Returns:
            传输层响应
        """
        raise NotImplementedError
