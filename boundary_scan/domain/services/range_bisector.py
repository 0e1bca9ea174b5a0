"""
Domain Service: Range Bisector

Narrows a window whose endpoint labels differ down to the exact indices
where the label changes. Midpoints are resolved through the shared cache;
when a midpoint carries a third label both halves are searched concurrently.

Cost: O(log width) lookups for a two-label window, more for every extra
label nested inside it. A window whose endpoints agree is never searched,
so an island of another label lying strictly between two agreeing samples
goes unnoticed.
"""

from typing import Any, Hashable, List, Optional, Sequence

from ..entities import Boundary, CancellationToken, Window
from .classifier_cache import ClassifierCache
from .concurrency import gather_or_cancel


class RangeBisector:
    """Recursive concurrent boundary search over one item sequence."""

    def __init__(
        self,
        cache: ClassifierCache,
        items: Sequence[Any],
        token: Optional[CancellationToken] = None,
    ):
        """
        Args:
            cache: Shared single-flight label cache
            items: The full, index-addressable item sequence
            token: Cancellation token checked before every lookup
        """
        self.cache = cache
        self.items = items
        self.token = token

    async def search_window(self, window: Window) -> List[Boundary]:
        return await self.find_boundaries(
            window.start_index, window.end_index, window.start_label, window.end_label
        )

    async def find_boundaries(
        self,
        start_index: int,
        end_index: int,
        start_label: Hashable,
        end_label: Hashable,
    ) -> List[Boundary]:
        """
        Find every boundary in (start_index, end_index].

        Args:
            start_index: Left index, label known to be start_label
            end_index: Right index, label known to be end_label
            start_label: Label at start_index
            end_label: Label at end_index

        Returns:
            Boundaries in increasing index order

        Raises:
            ClassifierError: If a midpoint lookup fails
            RunCancelled: If the token is set before a lookup is issued
        """
        if start_label == end_label:
            return []
        if end_index - start_index <= 1:
            return [Boundary(index=end_index, label=end_label)]

        mid = (start_index + end_index) // 2
        mid_label = await self._label_at(mid)

        if mid_label == start_label:
            return await self.find_boundaries(mid, end_index, mid_label, end_label)
        if mid_label == end_label:
            return await self.find_boundaries(start_index, mid, start_label, mid_label)

        left, right = await gather_or_cancel(
            self.find_boundaries(start_index, mid, start_label, mid_label),
            self.find_boundaries(mid, end_index, mid_label, end_label),
        )
        return left + right

    async def _label_at(self, index: int) -> Hashable:
        if self.token is not None:
            self.token.raise_if_cancelled()
        return await self.cache.lookup(self.items[index], self.token)
