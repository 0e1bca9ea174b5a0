"""
Unit tests for ClassifierCache

Tests:
- Single-flight: concurrent lookups of one key share one call
- Keys are item values, not indices
- Failed and cancelled entries are evicted, successes kept
- Bounded concurrency
"""

import asyncio

import pytest

from boundary_scan.domain.entities import CancellationToken
from boundary_scan.domain.exceptions import ClassifierError, RunCancelled
from boundary_scan.domain.services import ClassifierCache, default_item_key
from tests.conftest import CountingClassifier


class TestDefaultItemKey:

    def test_lists_and_tuples_share_a_key(self):
        assert default_item_key([120, 50, 50]) == default_item_key((120, 50, 50))

    def test_nested_sequences_are_frozen(self):
        assert default_item_key([[1, 2], [3]]) == ((1, 2), (3,))

    def test_scalars_are_used_as_is(self):
        assert default_item_key("teal") == "teal"
        assert default_item_key(7) == 7


class TestClassifierCache:

    @pytest.mark.asyncio
    async def test_concurrent_lookups_collapse_to_one_call(self):
        classifier = CountingClassifier(lambda item: f"name-{item}", latency_fn=lambda _: 0.01)
        cache = ClassifierCache(classifier)

        labels = await asyncio.gather(*(cache.lookup(5) for _ in range(10)))

        assert labels == ["name-5"] * 10
        assert classifier.calls[5] == 1
        assert cache.requests_issued == 1
        assert cache.hits == 9

    @pytest.mark.asyncio
    async def test_equal_values_at_different_indices_share_entry(self):
        classifier = CountingClassifier(lambda item: "green")
        cache = ClassifierCache(classifier)
        items = [[120, 50, 50], (120, 50, 50), [120, 50, 50]]

        for item in items:
            assert await cache.lookup(item) == "green"

        assert cache.requests_issued == 1
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_resolved_entries_are_reused(self):
        classifier = CountingClassifier(lambda item: item * 2)
        cache = ClassifierCache(classifier)

        assert await cache.lookup(3) == 6
        assert await cache.lookup(3) == 6

        assert classifier.total_calls == 1
        assert 3 in cache

    @pytest.mark.asyncio
    async def test_failure_propagates_to_every_waiter_and_is_evicted(self):
        classifier = CountingClassifier(lambda item: item, latency_fn=lambda _: 0.01, fail_on={4})
        cache = ClassifierCache(classifier)

        results = await asyncio.gather(
            cache.lookup(4), cache.lookup(4), return_exceptions=True
        )

        assert all(isinstance(r, ClassifierError) for r in results)
        assert classifier.calls[4] == 1
        await asyncio.sleep(0)
        assert 4 not in cache

        # A later lookup retries instead of replaying the failure
        classifier.fail_on.clear()
        assert await cache.lookup(4) == 4
        assert classifier.calls[4] == 2

    @pytest.mark.asyncio
    async def test_foreign_exceptions_are_wrapped(self):
        async def broken(item):
            raise KeyError("missing")

        class Broken(CountingClassifier):
            async def classify(self, item):
                return await broken(item)

        cache = ClassifierCache(Broken(lambda item: item))

        with pytest.raises(ClassifierError) as exc_info:
            await cache.lookup("x")

        assert exc_info.value.error_type == "KeyError"
        assert exc_info.value.item_key == "x"
        assert isinstance(exc_info.value.__cause__, KeyError)

    @pytest.mark.asyncio
    async def test_cancelling_one_waiter_keeps_shared_call_alive(self):
        classifier = CountingClassifier(lambda item: "red", latency_fn=lambda _: 0.05)
        cache = ClassifierCache(classifier)

        first = asyncio.ensure_future(cache.lookup(0))
        second = asyncio.ensure_future(cache.lookup(0))
        await asyncio.sleep(0.01)
        first.cancel()

        assert await second == "red"
        assert first.cancelled()
        assert classifier.calls[0] == 1

    @pytest.mark.asyncio
    async def test_cancelling_last_waiter_cancels_the_call(self):
        classifier = CountingClassifier(lambda item: "red", latency_fn=lambda _: 1.0)
        cache = ClassifierCache(classifier)

        waiter = asyncio.ensure_future(cache.lookup(0))
        await asyncio.sleep(0.01)
        assert classifier.in_flight == 1

        waiter.cancel()
        await asyncio.gather(waiter, return_exceptions=True)
        await asyncio.sleep(0.01)

        assert classifier.in_flight == 0
        assert 0 not in cache

    @pytest.mark.asyncio
    async def test_new_caller_starts_fresh_call_after_abandonment(self):
        classifier = CountingClassifier(lambda item: "red", latency_fn=lambda _: 0.05)
        cache = ClassifierCache(classifier)

        abandoned = asyncio.ensure_future(cache.lookup(1))
        await asyncio.sleep(0.01)
        abandoned.cancel()
        await asyncio.sleep(0)

        assert await cache.lookup(1) == "red"
        assert abandoned.cancelled()

    @pytest.mark.asyncio
    async def test_queued_call_skipped_once_its_run_is_cancelled(self):
        classifier = CountingClassifier(lambda item: item, latency_fn=lambda _: 0.05)
        cache = ClassifierCache(classifier, max_concurrency=1)
        token = CancellationToken()

        running = asyncio.ensure_future(cache.lookup(0))
        queued = asyncio.ensure_future(cache.lookup(1, token))
        await asyncio.sleep(0.01)
        token.cancel("user")

        assert await running == 0
        with pytest.raises(RunCancelled):
            await queued
        assert classifier.calls[1] == 0
        assert 1 not in cache

    @pytest.mark.asyncio
    async def test_queued_call_kept_while_another_run_still_waits(self):
        classifier = CountingClassifier(lambda item: item, latency_fn=lambda _: 0.05)
        cache = ClassifierCache(classifier, max_concurrency=1)
        token = CancellationToken()

        running = asyncio.ensure_future(cache.lookup(0))
        cancelled_run = asyncio.ensure_future(cache.lookup(1, token))
        healthy_run = asyncio.ensure_future(cache.lookup(1, CancellationToken()))
        await asyncio.sleep(0.01)
        token.cancel("user")

        assert await running == 0
        assert await healthy_run == 1
        assert await cancelled_run == 1
        assert classifier.calls[1] == 1

    @pytest.mark.asyncio
    async def test_max_concurrency_bounds_in_flight_calls(self):
        classifier = CountingClassifier(lambda item: item, latency_fn=lambda _: 0.01)
        cache = ClassifierCache(classifier, max_concurrency=3)

        await asyncio.gather(*(cache.lookup(i) for i in range(12)))

        assert classifier.total_calls == 12
        assert classifier.max_in_flight <= 3

    @pytest.mark.asyncio
    async def test_custom_key_function(self):
        classifier = CountingClassifier(lambda item: item[0] // 10)
        cache = ClassifierCache(classifier, key_fn=lambda item: item[0])

        await cache.lookup((10, "first swatch"))
        await cache.lookup((10, "second swatch"))

        assert cache.requests_issued == 1

    def test_invalid_concurrency_rejected(self):
        with pytest.raises(ValueError, match="max_concurrency"):
            ClassifierCache(CountingClassifier(lambda item: item), max_concurrency=0)
