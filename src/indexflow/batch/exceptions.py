"""索引操作与批次异常定义模块."""

from ..exceptions import IndexFlowError


class ConstructionError(IndexFlowError):
    """构造异常基类.

    在任何网络交互之前检测到的非法操作或非法批次，不会被自动重试。
    """

    pass


class InvalidIndexActionError(ConstructionError):
    """非法索引操作异常（文档缺少键字段或键值为空）."""

    pass


class InvalidIndexBatchError(ConstructionError):
    """非法索引批次异常（批次为空或超过批次大小上限）."""

    pass
