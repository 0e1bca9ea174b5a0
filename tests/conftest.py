"""
Shared test fixtures and utilities for boundary scan tests
"""

import asyncio
from collections import Counter
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional

import pytest
from unittest.mock import AsyncMock, MagicMock

from boundary_scan.application.interfaces import IClassifier
from boundary_scan.config import clear_config_cache
from boundary_scan.domain.exceptions import ClassifierError


class CountingClassifier(IClassifier):
    """
    Stub classifier for synthetic label functions.

    Counts every call per item, tracks how many calls are in flight and can
    delay or fail individual items.
    """

    def __init__(
        self,
        label_fn: Callable[[Any], Hashable],
        latency_fn: Optional[Callable[[Any], float]] = None,
        fail_on: Iterable[Any] = (),
    ):
        self.label_fn = label_fn
        self.latency_fn = latency_fn
        self.fail_on = set(fail_on)
        self.calls: Counter = Counter()
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def classifier_id(self) -> str:
        return "counting-stub"

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def classify(self, item: Any) -> Hashable:
        self.calls[item] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.latency_fn(item) if self.latency_fn else 0.0
            await asyncio.sleep(delay)
            if item in self.fail_on:
                raise ClassifierError(f"stub failure for {item!r}", error_type="stub")
            return self.label_fn(item)
        finally:
            self.in_flight -= 1


def label_table(labels: List[Hashable]) -> Callable[[int], Hashable]:
    """Label function for items that are plain indices into `labels`."""
    return lambda index: labels[index]


def expected_segments(labels: List[Hashable]) -> List[tuple]:
    """Brute-force first occurrence of every label, in index order."""
    seen = set()
    result = []
    for index, label in enumerate(labels):
        if label not in seen:
            seen.add(label)
            result.append((index, label))
    return result


async def collect(stream) -> List:
    return [segment async for segment in stream]


def create_mock_aiohttp_response(status=200, json_data=None, text_data="", json_error=None):
    """
    Helper to create a mocked aiohttp session whose get() returns one response.

    Args:
        status: HTTP status code
        json_data: Dictionary to return from response.json()
        text_data: String to return from response.text()
        json_error: Exception raised by response.json() instead

    Returns:
        Tuple of (mock_session, mock_response)
    """
    mock_response = MagicMock()
    mock_response.status = status
    if json_error is not None:
        mock_response.json = AsyncMock(side_effect=json_error)
    else:
        mock_response.json = AsyncMock(return_value=json_data)
    mock_response.text = AsyncMock(return_value=text_data)

    # Mock async context manager for session.get()
    mock_get_context = AsyncMock()
    mock_get_context.__aenter__.return_value = mock_response
    mock_get_context.__aexit__.return_value = None

    mock_session = MagicMock()
    mock_session.get.return_value = mock_get_context
    mock_session.close = AsyncMock()

    return mock_session, mock_response


def create_mock_aiohttp_sequence(*responses):
    """
    Mocked session whose successive get() calls yield the given outcomes.

    Each outcome is either an exception (raised by get()) or a
    (status, json_data, text_data) tuple.
    """
    contexts = []
    for outcome in responses:
        if isinstance(outcome, BaseException):
            contexts.append(outcome)
            continue
        status, json_data, text_data = outcome
        mock_response = MagicMock()
        mock_response.status = status
        mock_response.json = AsyncMock(return_value=json_data)
        mock_response.text = AsyncMock(return_value=text_data)
        context = AsyncMock()
        context.__aenter__.return_value = mock_response
        context.__aexit__.return_value = None
        contexts.append(context)

    mock_session = MagicMock()
    mock_session.get.side_effect = contexts
    mock_session.close = AsyncMock()
    return mock_session


def color_api_payload(name: str) -> Dict:
    """Trimmed TheColorAPI /id response body."""
    return {
        "hex": {"value": "#40BF40", "clean": "40BF40"},
        "name": {
            "value": name,
            "closest_named_hex": "#3FBF3F",
            "exact_match_name": False,
            "distance": 12,
        },
    }


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload YAML config for every test so env/config edits do not leak."""
    clear_config_cache()
    yield
    clear_config_cache()
