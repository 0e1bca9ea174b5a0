"""
Engine entry point

discover_all() is the one-call way to scan a sequence: wrap the classifier,
build a use case and stream its segments.

    async with aclosing(discover_all(items, classify, token, stride=10)) as segments:
        async for segment in segments:
            ...
"""

from typing import Any, AsyncIterator, Callable, Hashable, Iterable, Optional, Union

from boundary_scan.application.dtos import DiscoverRequest
from boundary_scan.application.interfaces import IClassifier
from boundary_scan.application.use_cases import DiscoverBoundariesUseCase
from boundary_scan.domain.entities import CancellationToken, Segment
from boundary_scan.domain.services import ClassifierCache
from boundary_scan.infrastructure.clients import CallableClassifier


def as_classifier(classify: Union[IClassifier, Callable[[Any], Any]]) -> IClassifier:
    if isinstance(classify, IClassifier):
        return classify
    return CallableClassifier(classify)


async def discover_all(
    items: Iterable[Any],
    classify: Union[IClassifier, Callable[[Any], Any]],
    cancel_token: Optional[CancellationToken] = None,
    *,
    stride: int = 10,
    max_concurrency: int = 8,
    key_fn: Optional[Callable[[Any], Hashable]] = None,
    cache: Optional[ClassifierCache] = None,
) -> AsyncIterator[Segment]:
    """
    Stream the label boundaries of `items` in increasing index order.

    Args:
        items: Finite ordered sequence
        classify: IClassifier or async callable item -> label
        cancel_token: Shared token; setting it ends the stream without error
        stride: Coarse sample stride (>= 2)
        max_concurrency: Upper bound on in-flight classify calls
        key_fn: Item key function for the label cache
        cache: Existing cache to reuse labels from earlier runs

    Yields:
        Segment for every first-seen label, index 0 first

    Raises:
        ClassifierError: If any classify call fails
    """
    use_case = DiscoverBoundariesUseCase(
        classifier=as_classifier(classify),
        request=DiscoverRequest(stride=stride, max_concurrency=max_concurrency),
        cache=cache,
        key_fn=key_fn,
    )
    # Run the use case's own generator so its cleanup runs on aclose()
    stream = use_case.discover_all(items, cancel_token)
    try:
        async for segment in stream:
            yield segment
    finally:
        await stream.aclose()
