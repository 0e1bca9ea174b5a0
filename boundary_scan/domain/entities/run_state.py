"""
Domain Entity: Run State

Lifecycle of a single scan run:

    IDLE -> SAMPLING -> BISECTING -> DRAINING -> DONE
                                              -> CANCELLED
                                              -> FAILED

CANCELLED and FAILED are reachable from every non-terminal state.
Terminal states accept no further transitions.
"""

from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from ..exceptions import InvalidStateTransition


class RunState(str, Enum):
    IDLE = "IDLE"
    SAMPLING = "SAMPLING"
    BISECTING = "BISECTING"
    DRAINING = "DRAINING"
    DONE = "DONE"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES: FrozenSet[RunState] = frozenset(
    {RunState.DONE, RunState.CANCELLED, RunState.FAILED}
)

_ABORT = {RunState.CANCELLED, RunState.FAILED}

ALLOWED_TRANSITIONS: Dict[RunState, FrozenSet[RunState]] = {
    # Empty input finishes straight from IDLE
    RunState.IDLE: frozenset({RunState.SAMPLING, RunState.DONE} | _ABORT),
    # A single sample point has no windows to bisect
    RunState.SAMPLING: frozenset({RunState.BISECTING, RunState.DRAINING} | _ABORT),
    RunState.BISECTING: frozenset({RunState.DRAINING} | _ABORT),
    RunState.DRAINING: frozenset({RunState.DONE} | _ABORT),
    RunState.DONE: frozenset(),
    RunState.CANCELLED: frozenset(),
    RunState.FAILED: frozenset(),
}


class RunStateMachine:
    """Tracks the state of one run and rejects illegal transitions."""

    def __init__(
        self,
        on_transition: Optional[Callable[[RunState, RunState], None]] = None,
    ):
        """
        Args:
            on_transition: Optional callback invoked as (old, new) after each move
        """
        self._state = RunState.IDLE
        self._history: List[Tuple[RunState, RunState]] = []
        self._on_transition = on_transition

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def history(self) -> List[Tuple[RunState, RunState]]:
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return self._state.is_terminal

    def can_transition(self, target: RunState) -> bool:
        return target in ALLOWED_TRANSITIONS[self._state]

    def transition(self, target: RunState) -> None:
        if not self.can_transition(target):
            raise InvalidStateTransition(
                f"Cannot move run from {self._state.value} to {target.value}"
            )
        previous = self._state
        self._state = target
        self._history.append((previous, target))
        if self._on_transition is not None:
            self._on_transition(previous, target)
