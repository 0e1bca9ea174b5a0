"""
Domain Service: Classifier Cache

Memoizes label lookups by item key with single-flight semantics:
the first caller for a key issues the classifier call, every later
caller for the same key awaits that same pending task.
"""

import asyncio
from typing import Any, Callable, Dict, Hashable, List, Optional

from boundary_scan.application.interfaces import IClassifier

from ..entities import CancellationToken
from ..exceptions import ClassifierError, RunCancelled


def default_item_key(item: Any) -> Hashable:
    """
    Canonical cache key of an item: its value, never its index.

    Lists and tuples are frozen into (nested) tuples so that [120, 50, 50]
    and (120, 50, 50) share one entry.
    """
    if isinstance(item, (list, tuple)):
        return tuple(default_item_key(part) for part in item)
    return item


class ClassifierCache:
    """
    Single-flight label cache shared by every task of a run.

    Entries are asyncio tasks, so pending and resolved lookups live in the
    same map. Successful entries are kept for the life of the cache (it may
    be reused across runs, even concurrently); failed or abandoned entries
    are dropped so a later lookup starts a fresh call.

    Every waiter registers the cancellation token of its run. A call that
    gets through the concurrency limiter only after all of its waiters' runs
    were cancelled never reaches the classifier.
    """

    def __init__(
        self,
        classifier: IClassifier,
        max_concurrency: int = 8,
        key_fn: Optional[Callable[[Any], Hashable]] = None,
    ):
        """
        Initialize cache.

        Args:
            classifier: Client performing the real (expensive) lookups
            max_concurrency: Upper bound on in-flight classifier calls
            key_fn: Maps an item to its cache key (defaults to default_item_key)
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.classifier = classifier
        self.max_concurrency = max_concurrency
        self.key_fn = key_fn or default_item_key
        self._entries: Dict[Hashable, asyncio.Task] = {}
        self._waiters: Dict[asyncio.Task, List[Optional[CancellationToken]]] = {}
        self._limiter: Optional[asyncio.Semaphore] = None
        self.requests_issued = 0
        self.hits = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item: Any) -> bool:
        return self.key_fn(item) in self._entries

    async def lookup(self, item: Any, token: Optional[CancellationToken] = None) -> Hashable:
        """
        Resolve an item's label, issuing at most one classifier call per key.

        A caller that is cancelled stops waiting without disturbing other
        waiters; the shared call itself is cancelled once nobody waits on it.

        Args:
            item: Item to classify
            token: Cancellation token of the calling run, if any

        Raises:
            ClassifierError: If the underlying classify call failed
            RunCancelled: If every run waiting on the call was cancelled
                before the call was issued
        """
        key = self.key_fn(item)
        task = self._entries.get(key)
        if task is not None and self._abandoned(task):
            task = None
        if task is None:
            task = asyncio.ensure_future(self._fetch(key, item))
            self._entries[key] = task
            task.add_done_callback(lambda done, key=key: self._settle(key, done))
        else:
            self.hits += 1

        if task.done():
            return task.result()

        waiters = self._waiters.setdefault(task, [])
        waiters.append(token)
        try:
            return await asyncio.shield(task)
        finally:
            waiters.remove(token)
            if not waiters:
                self._waiters.pop(task, None)
                if not task.done():
                    # Unreachable for new callers from here on
                    if self._entries.get(key) is task:
                        del self._entries[key]
                    task.cancel()
                    await asyncio.wait({task})

    async def _fetch(self, key: Hashable, item: Any) -> Hashable:
        if self._limiter is None:
            self._limiter = asyncio.Semaphore(self.max_concurrency)
        async with self._limiter:
            self._raise_if_unwanted(asyncio.current_task())
            self.requests_issued += 1
            try:
                return await self.classifier.classify(item)
            except ClassifierError as exc:
                if exc.item_key is None:
                    exc.item_key = key
                raise
            except Exception as exc:
                raise ClassifierError(
                    f"{exc.__class__.__name__}: {exc}",
                    error_type=exc.__class__.__name__,
                    item_key=key,
                ) from exc

    def _raise_if_unwanted(self, task: Optional[asyncio.Task]) -> None:
        tokens = self._waiters.get(task)
        if tokens and all(t is not None and t.is_cancelled for t in tokens):
            raise RunCancelled(tokens[0].reason or "cancelled")

    @staticmethod
    def _abandoned(task: asyncio.Task) -> bool:
        if not task.done():
            return False
        return task.cancelled() or isinstance(task.exception(), RunCancelled)

    def _settle(self, key: Hashable, task: asyncio.Task) -> None:
        self._waiters.pop(task, None)
        if task.cancelled() or task.exception() is not None:
            # Only evict if the entry was not already replaced
            if self._entries.get(key) is task:
                del self._entries[key]
