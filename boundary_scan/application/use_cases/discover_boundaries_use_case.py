"""
Discover Boundaries Use Case

Orchestrates one scan run over an ordered item sequence:

1. Sample: resolve a coarse grid of labels concurrently
2. Bisect: launch one search task per window whose endpoints disagree
3. Drain: hand segments to the caller strictly in window order

Windows finish in any order; results are drained left to right, so the
caller always sees segments in increasing index order. While waiting on the
current window the orchestrator also watches the other windows and the
cancellation token, so a failure anywhere (or a cancel) is seen at once.
"""

import asyncio
import logging
import time
import uuid
from typing import Any, AsyncIterator, Callable, Hashable, Iterable, List, Optional, Sequence

from boundary_scan.application.dtos import DiscoverRequest
from boundary_scan.application.interfaces import IClassifier
from boundary_scan.domain.entities import (
    CancellationToken,
    RunState,
    RunStateMachine,
    Segment,
    Window,
)
from boundary_scan.domain.exceptions import RunCancelled
from boundary_scan.domain.services import (
    ClassifierCache,
    OrderedEmitter,
    RangeBisector,
    Sampler,
    cancel_and_wait,
)
from boundary_scan.logging_utils import StructuredLogger
from boundary_scan.models import ComponentType, EventType


class DiscoverBoundariesUseCase:
    """
    Use case for streaming label boundaries of an item sequence.

    Dependencies:
    - classifier: performs the expensive lookups (wrapped by the cache)
    - cache: single-flight label cache; pass one in to reuse labels across runs
    - logger: structured event logger

    The returned stream is lazy and one-shot. Closing it early (aclose(),
    e.g. through contextlib.aclosing) is equivalent to cancelling the run:
    every in-flight task is cancelled and awaited before aclose() returns.
    """

    def __init__(
        self,
        classifier: IClassifier,
        request: Optional[DiscoverRequest] = None,
        cache: Optional[ClassifierCache] = None,
        key_fn: Optional[Callable[[Any], Hashable]] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize the use case with dependencies.

        Args:
            classifier: Label source for items
            request: Stride and concurrency settings (defaults to DiscoverRequest())
            cache: Existing cache to share; built from classifier when omitted
            key_fn: Item key function for a newly built cache
            logger: Structured logger (defaults to the orchestrator component)
        """
        self._classifier = classifier
        self._request = request or DiscoverRequest()
        self._cache = cache or ClassifierCache(
            classifier,
            max_concurrency=self._request.max_concurrency,
            key_fn=key_fn,
        )
        self._logger = logger or StructuredLogger(ComponentType.ORCHESTRATOR)
        self._last_run: Optional[RunStateMachine] = None

    @property
    def classifier(self) -> IClassifier:
        return self._classifier

    @property
    def cache(self) -> ClassifierCache:
        return self._cache

    @property
    def request(self) -> DiscoverRequest:
        return self._request

    @property
    def last_state(self) -> Optional[RunState]:
        """Final (or current) state of the most recent run."""
        return self._last_run.state if self._last_run else None

    async def discover_all(
        self,
        items: Iterable[Any],
        token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[Segment]:
        """
        Stream one segment per first-seen label, in increasing index order.

        Args:
            items: Finite ordered sequence (materialized if not indexable)
            token: Shared cancellation token; a fresh one is used when omitted

        Yields:
            Segment(index, label, item)

        Raises:
            ClassifierError: If any classifier call fails; remaining work is
                cancelled first. Cancellation ends the stream without error.
        """
        if not isinstance(items, Sequence):
            items = list(items)
        token = token or CancellationToken()
        run_id = str(uuid.uuid4())[:8]
        machine = RunStateMachine(
            on_transition=lambda old, new: self._logger.log_event(
                run_id,
                EventType.STATE_TRANSITION,
                {"from": old.value, "to": new.value},
                level=logging.DEBUG,
            )
        )
        self._last_run = machine

        start_time = time.time()
        requests_before = self._cache.requests_issued
        window_tasks: List[Optional[asyncio.Task]] = []
        sample_task: Optional[asyncio.Task] = None
        cancel_waiter: Optional[asyncio.Task] = None
        emitted = 0

        self._logger.log_event(
            run_id,
            EventType.RUN_STARTED,
            {"items": len(items), "stride": self._request.stride},
            metrics={"max_concurrency": self._request.max_concurrency},
        )

        try:
            token.raise_if_cancelled()
            if not items:
                machine.transition(RunState.DONE)
                return

            cancel_waiter = asyncio.ensure_future(token.wait())
            # Stop in-flight work as soon as the token is set, even while the
            # consumer is not pulling from the stream
            run_tasks: List[asyncio.Task] = []
            cancel_waiter.add_done_callback(
                lambda waiter: self._abort_run_tasks(waiter, run_tasks)
            )

            # 1. Coarse pass
            machine.transition(RunState.SAMPLING)
            sampler = Sampler(self._cache, stride=self._request.stride)
            sample_task = asyncio.ensure_future(sampler.sample(items, token))
            run_tasks.append(sample_task)
            await asyncio.wait({sample_task, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
            token.raise_if_cancelled()
            samples = sample_task.result()

            windows = Window.from_samples(samples)
            self._logger.log_event(
                run_id,
                EventType.SAMPLES_RESOLVED,
                {"samples": len(samples), "windows": len(windows)},
            )

            # 2. One search per disagreeing window, all running concurrently
            bisector = RangeBisector(self._cache, items, token)
            if windows:
                machine.transition(RunState.BISECTING)
            window_tasks = [
                asyncio.ensure_future(bisector.search_window(window))
                if window.needs_search else None
                for window in windows
            ]
            run_tasks.extend(task for task in window_tasks if task is not None)
            launched = sum(1 for task in window_tasks if task is not None)
            self._logger.log_event(
                run_id,
                EventType.WINDOW_LAUNCHED,
                {"searched": launched, "skipped": len(windows) - launched},
            )

            # 3. Drain in window order
            machine.transition(RunState.DRAINING)
            emitter = OrderedEmitter(items)
            token.raise_if_cancelled()
            yield emitter.seed(samples[0].label)
            emitted += 1

            for window, task in zip(windows, window_tasks):
                if task is None:
                    continue
                boundaries = await self._await_in_order(task, window_tasks, cancel_waiter, token)
                for segment in emitter.admit_all(boundaries):
                    token.raise_if_cancelled()
                    self._logger.log_event(
                        run_id,
                        EventType.SEGMENT_EMITTED,
                        {"index": segment.index, "label": segment.label, "window": window.position},
                        level=logging.DEBUG,
                    )
                    yield segment
                    emitted += 1

            token.raise_if_cancelled()
            machine.transition(RunState.DONE)

        except RunCancelled:
            machine.transition(RunState.CANCELLED)
        except (GeneratorExit, asyncio.CancelledError):
            # Consumer closed the stream or its task was cancelled
            token.cancel("consumer closed the stream")
            if not machine.is_terminal:
                machine.transition(RunState.CANCELLED)
            raise
        except Exception as exc:
            machine.transition(RunState.FAILED)
            self._logger.log_event(
                run_id,
                EventType.RUN_FAILED,
                {"error": f"{type(exc).__name__}: {exc}"},
                metrics={"segments": emitted},
                level=logging.ERROR,
            )
            raise
        finally:
            pending = [task for task in window_tasks if task is not None]
            for task in (sample_task, cancel_waiter):
                if task is not None:
                    pending.append(task)
            await cancel_and_wait(pending)

            metrics = {
                "segments": emitted,
                "classifier_calls": self._cache.requests_issued - requests_before,
                "cache_entries": len(self._cache),
                "elapsed_ms": (time.time() - start_time) * 1000,
            }
            if machine.state == RunState.DONE:
                self._logger.log_event(run_id, EventType.RUN_COMPLETED, {"items": len(items)}, metrics)
            elif machine.state == RunState.CANCELLED:
                self._logger.log_event(
                    run_id, EventType.RUN_CANCELLED, {"reason": token.reason}, metrics
                )

    async def _await_in_order(
        self,
        task: asyncio.Task,
        window_tasks: List[Optional[asyncio.Task]],
        cancel_waiter: asyncio.Task,
        token: CancellationToken,
    ) -> list:
        """Wait for one window while surfacing failures and cancels from all others."""
        while True:
            token.raise_if_cancelled()
            self._raise_first_failure(window_tasks)
            if task.done():
                return task.result()
            watched = {t for t in window_tasks if t is not None and not t.done()}
            watched.add(cancel_waiter)
            await asyncio.wait(watched, return_when=asyncio.FIRST_COMPLETED)

    @staticmethod
    def _abort_run_tasks(waiter: asyncio.Task, run_tasks: List[asyncio.Task]) -> None:
        if waiter.cancelled():
            return
        for task in run_tasks:
            if not task.done():
                task.cancel()

    @staticmethod
    def _raise_first_failure(window_tasks: List[Optional[asyncio.Task]]) -> None:
        for t in window_tasks:
            if t is None or not t.done() or t.cancelled():
                continue
            exc = t.exception()
            if exc is not None:
                raise exc
