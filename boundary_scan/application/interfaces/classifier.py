"""
IClassifier Interface

Interface for the expensive label lookup the scan engine is built around.
The engine depends on this abstraction, not on a concrete HTTP client.
"""

from abc import ABC, abstractmethod
from typing import Any, Hashable


class IClassifier(ABC):
    """
    Interface for an async item classifier.

    Implementations:
    - ColorApiClassifier: names HSL colours via TheColorAPI
    - CallableClassifier: adapts a plain async function (tests, notebooks)

    Implementations MUST be safe to call concurrently for different items.
    Equal items (by key) should resolve to equal labels; the engine assumes
    this but does not enforce it. Retries, if any, belong here and not in
    the engine.
    """

    @abstractmethod
    async def classify(self, item: Any) -> Hashable:
        """
        Resolve the label of one item.

        Args:
            item: Value at some index of the scanned sequence

        Returns:
            Opaque, hashable label

        Raises:
            ClassifierError: On transport, decode or service-side failure
        """
        pass

    @property
    @abstractmethod
    def classifier_id(self) -> str:
        """Stable identifier used in logs."""
        pass

    async def close(self):
        """Release any resources (no-op by default)."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
