"""
Domain Layer

Pure scan logic: entities (sample points, windows, boundaries, segments,
run state, cancellation) and services (cache, sampler, bisector, emitter).
Nothing here knows about HTTP, colours or configuration files.
"""

from .exceptions import ClassifierError, RunCancelled, InvalidStateTransition

__all__ = [
    "ClassifierError",
    "RunCancelled",
    "InvalidStateTransition",
]
