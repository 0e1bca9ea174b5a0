"""
Boundary Scan Core Package

Finds every index at which an expensive, cacheable classifier changes its
label over an ordered sequence, with far fewer classifier calls than items.

Architecture: Sample, Bisect, Drain
- A coarse stride grid is labelled concurrently
- Windows whose endpoints disagree are bisected concurrently
- Segments are streamed strictly in index order, one per first-seen label
- A shared cancellation token stops all work without raising
"""

__version__ = "0.1.0"

from .domain.exceptions import ClassifierError, RunCancelled, InvalidStateTransition
from .domain.entities import (
    SamplePoint, Boundary, Window, Segment, CancellationToken, RunState
)
from .domain.services import ClassifierCache
from .application.interfaces import IClassifier
from .application.use_cases import DiscoverBoundariesUseCase
from .engine import discover_all
