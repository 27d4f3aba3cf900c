"""indexflow 类型定义模块."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Dict, List, Union

# 单值字段类型（GeoPoint 以 Any 表示）
ScalarValue = Union[None, bool, int, float, str, datetime, Any]

# 字段值类型：标量或同构标量列表
FieldValue = Union[ScalarValue, List[ScalarValue]]

# 线上（JSON 兼容）文档格式
WireDocument = Dict[str, Any]

# 重试批次提取时的键选择器：字段名或键访问函数
KeySelector = Union[str, Callable[[Any], Any]]
