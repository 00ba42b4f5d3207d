"""
Splits a set of metrics into batches of bounded size.
"""
from itertools import islice
from typing import FrozenSet, Iterable, List

from .metric import Metric

Batch = FrozenSet[Metric]


def partition(metrics: Iterable[Metric], limit: int) -> List[Batch]:
    """
    Partition metrics into batches of at most ``limit`` metrics.

    Duplicates collapse first, so the batches cover each distinct metric
    exactly once. A ``limit`` of zero or less disables partitioning.

    Args:
        metrics: The metrics to partition
        limit (int): Maximum number of metrics per batch

    Returns:
        list: Batches as frozensets, empty if there is nothing to send
    """
    unique = frozenset(metrics)
    if not unique:
        return []
    if limit <= 0 or len(unique) <= limit:
        return [unique]

    batches = []
    remaining = iter(unique)
    while True:
        batch = frozenset(islice(remaining, limit))
        if not batch:
            break
        batches.append(batch)
    return batches
