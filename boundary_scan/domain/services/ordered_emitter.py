"""
Domain Service: Ordered Emitter

Decides which boundaries become segments. Index 0 is always seeded with
the first sample's label; afterwards a label is emitted only the first time
it is seen in the run, no matter how many disjoint ranges carry it.
"""

from typing import Any, Hashable, List, Optional, Sequence, Set

from ..entities import Boundary, Segment


class OrderedEmitter:
    """Per-run label deduplication over boundaries fed in index order."""

    def __init__(self, items: Sequence[Any]):
        self.items = items
        self._seen: Set[Hashable] = set()
        self._last_index: Optional[int] = None
        self.dropped = 0

    @property
    def emitted_labels(self) -> Set[Hashable]:
        return set(self._seen)

    def seed(self, label: Hashable) -> Segment:
        """Emit the item at index 0; it has no preceding label to differ from."""
        if self._last_index is not None:
            raise RuntimeError("Emitter already seeded")
        self._seen.add(label)
        self._last_index = 0
        return Segment(index=0, label=label, item=self.items[0])

    def admit(self, boundary: Boundary) -> Optional[Segment]:
        """
        Turn a boundary into a segment unless its label was already emitted.

        Raises:
            RuntimeError: If called before seed() or out of index order
        """
        if self._last_index is None:
            raise RuntimeError("Emitter must be seeded before admitting boundaries")
        if boundary.index <= self._last_index:
            raise RuntimeError(
                f"Boundary at {boundary.index} arrived after index {self._last_index}"
            )
        self._last_index = boundary.index

        if boundary.label in self._seen:
            self.dropped += 1
            return None
        self._seen.add(boundary.label)
        return Segment(index=boundary.index, label=boundary.label, item=self.items[boundary.index])

    def admit_all(self, boundaries: List[Boundary]) -> List[Segment]:
        segments = []
        for boundary in boundaries:
            segment = self.admit(boundary)
            if segment is not None:
                segments.append(segment)
        return segments
