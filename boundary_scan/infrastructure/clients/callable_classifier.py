"""
Callable Classifier

Adapts a plain async function (or a sync one) to IClassifier, for callers
that do not want to write a class.
"""

import inspect
from typing import Any, Callable, Hashable

from boundary_scan.application.interfaces import IClassifier


class CallableClassifier(IClassifier):
    """Wraps `fn(item) -> label` (or an awaitable of one)."""

    def __init__(self, fn: Callable[[Any], Any], classifier_id: str = "callable"):
        if not callable(fn):
            raise TypeError(f"Expected a callable classifier, got {type(fn).__name__}")
        self._fn = fn
        self._classifier_id = classifier_id

    @property
    def classifier_id(self) -> str:
        return self._classifier_id

    async def classify(self, item: Any) -> Hashable:
        result = self._fn(item)
        if inspect.isawaitable(result):
            result = await result
        return result
