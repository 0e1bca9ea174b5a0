"""
Domain Entities for the boundary scan engine
"""

from .scan_points import (
    SamplePoint,
    Boundary,
    Window,
    Segment,
)
from .cancellation import CancellationToken
from .run_state import RunState, RunStateMachine, TERMINAL_STATES

__all__ = [
    "SamplePoint",
    "Boundary",
    "Window",
    "Segment",
    "CancellationToken",
    "RunState",
    "RunStateMachine",
    "TERMINAL_STATES",
]
