"""
Domain Service: Sampler

Coarse pass over the item sequence: picks every stride-th index (plus the
final index) and resolves their labels concurrently through the cache.
"""

from typing import Any, List, Optional, Sequence

from ..entities import SamplePoint, CancellationToken
from .classifier_cache import ClassifierCache
from .concurrency import gather_or_cancel


def sample_indices(n: int, stride: int) -> List[int]:
    """
    Compute the coarse sample grid {0, S, 2S, ...} plus n-1.

    Args:
        n: Number of items
        stride: Distance between samples (>= 2)

    Returns:
        Sorted list of indices; empty when n == 0
    """
    if stride < 2:
        raise ValueError(f"stride must be >= 2, got {stride}")
    if n < 0:
        raise ValueError(f"n cannot be negative, got {n}")
    if n == 0:
        return []

    indices = list(range(0, n, stride))
    if indices[-1] != n - 1:
        indices.append(n - 1)
    return indices


class Sampler:
    """Resolves the labels of the coarse sample grid."""

    def __init__(self, cache: ClassifierCache, stride: int = 10):
        if stride < 2:
            raise ValueError(f"stride must be >= 2, got {stride}")
        self.cache = cache
        self.stride = stride

    async def sample(
        self,
        items: Sequence[Any],
        token: Optional[CancellationToken] = None,
    ) -> List[SamplePoint]:
        """
        Resolve every sample index concurrently.

        Returns:
            Sample points in increasing index order

        Raises:
            ClassifierError: If any sample lookup fails
            RunCancelled: If the token is set before a lookup is issued
        """
        indices = sample_indices(len(items), self.stride)
        if not indices:
            return []

        async def resolve(index: int) -> SamplePoint:
            if token is not None:
                token.raise_if_cancelled()
            label = await self.cache.lookup(items[index], token)
            return SamplePoint(index=index, label=label)

        return await gather_or_cancel(*(resolve(index) for index in indices))
