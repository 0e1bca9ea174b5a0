"""
Domain Entity: Scan Points

Value objects produced while scanning an ordered item sequence:
sample points from the coarse pass, the windows between them, the
boundaries found inside windows and the segments handed to callers.
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List


@dataclass(frozen=True)
class SamplePoint:
    """An (index, label) pair resolved during the coarse pass."""
    index: int
    label: Hashable


@dataclass(frozen=True)
class Boundary:
    """First index inside a window whose label differs from the previous index."""
    index: int
    label: Hashable


@dataclass(frozen=True)
class Window:
    """
    Closed interval between two adjacent sample points.

    Attributes:
        position: Left-to-right position of the window in the sample grid
        start_index: Index of the left sample point
        end_index: Index of the right sample point
        start_label: Label at start_index
        end_label: Label at end_index
    """
    position: int
    start_index: int
    end_index: int
    start_label: Hashable
    end_label: Hashable

    def __post_init__(self):
        if self.end_index <= self.start_index:
            raise ValueError(
                f"Window end ({self.end_index}) must be greater than start ({self.start_index})"
            )

    @property
    def needs_search(self) -> bool:
        """Windows whose endpoints agree contribute no boundaries."""
        return self.start_label != self.end_label

    @property
    def width(self) -> int:
        return self.end_index - self.start_index

    @classmethod
    def from_samples(cls, samples: List[SamplePoint]) -> List["Window"]:
        """Pair up adjacent sample points into windows (in index order)."""
        return [
            cls(
                position=position,
                start_index=left.index,
                end_index=right.index,
                start_label=left.label,
                end_label=right.label,
            )
            for position, (left, right) in enumerate(zip(samples, samples[1:]))
        ]


@dataclass(frozen=True)
class Segment:
    """Externally visible unit: a label and the item at its first-seen index."""
    index: int
    label: Hashable
    item: Any

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "label": self.label,
            "item": self.item,
        }
