"""indexflow 异常定义模块."""


class IndexFlowError(Exception):
    """indexflow 基础异常类."""

    pass
