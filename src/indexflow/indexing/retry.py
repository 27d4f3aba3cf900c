"""重试批次提取模块.

根据原始批次与服务端返回的结果，提取只包含失败操作的重试批次。

操作与结果严格按位置对应，批次中允许出现重复键。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..batch import IndexAction, IndexBatch
from ..typing import KeySelector
from .exceptions import RetryBatchMismatchError
from .models import IndexingResult

logger = logging.getLogger(__name__)


def _select_key(action: IndexAction[Any], key_selector: KeySelector | None) -> Any:
    if key_selector is None:
        return action.key
    if callable(key_selector):
        return key_selector(action.document)
    return action.to_document().get(key_selector)


def find_failed_actions_to_retry(
    batch: IndexBatch[Any],
    results: Sequence[IndexingResult],
    key_selector: KeySelector | None = None,
) -> IndexBatch[Any]:
    """提取失败操作组成的新批次.

    纯函数：不修改原始批次及其中的操作，返回的批次包含原样的操作对象
    （文档与操作类型不变），并保持它们在原始批次中的相对顺序。

    Args:
        batch: 原始批次（提交顺序）
        results: 与原始批次顺序一致的操作结果
        key_selector: 动态文档的键字段名，或类型化记录的键访问函数；
                      默认使用操作自身的键。仅用于校验操作与结果是否对应，
                      不参与关联

    Returns:
        只包含失败操作的新批次；没有失败操作时返回空批次

    Raises:
        RetryBatchMismatchError: 批次操作数与结果数不一致时抛出

    Examples:
        >>> retry_batch = find_failed_actions_to_retry(batch, error.results, "hotelId")
        >>> [a.key for a in retry_batch]
        ['3']
    """
    actions = batch.actions
    if len(actions) != len(results):
        raise RetryBatchMismatchError(
            f"批次操作数 ({len(actions)}) 与结果数 ({len(results)}) 不一致，"
            f"请确认传入的是提交时使用的原始批次"
        )

    failed: list[IndexAction[Any]] = []
    for position, (action, result) in enumerate(zip(actions, results)):
        if result.succeeded:
            continue
        selected = _select_key(action, key_selector)
        if selected is None or str(selected) != result.key:
            logger.warning(
                f"位置 {position} 的操作键 {selected!r} 与结果键 {result.key!r} "
                f"不一致，仍按位置关联"
            )
        failed.append(action)

    retry_batch: IndexBatch[Any] = IndexBatch(max_size=batch.max_size)
    retry_batch.extend(failed)
    logger.info(f"从 {len(actions)} 个操作中提取出 {len(failed)} 个待重试操作")
    return retry_batch
