"""
Domain Exceptions

Errors that cross the engine boundary (ClassifierError) and the internal
signal used to unwind a cancelled run (RunCancelled).
"""

from typing import Any, Optional


class ClassifierError(RuntimeError):
    """Raised when a classify call fails (transport, decode or service-side)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error_type: str = "classifier_error",
        retryable: bool = False,
        item_key: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_type = error_type
        self.retryable = retryable
        self.item_key = item_key


class RunCancelled(Exception):
    """Raised at a check point once the run's cancellation token is set."""
    pass


class InvalidStateTransition(RuntimeError):
    """Raised when a run is moved along an edge its state machine does not allow."""
    pass
