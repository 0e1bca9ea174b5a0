"""
Task helpers shared by the sampler, bisector and orchestrator.
"""

import asyncio
from typing import Any, Awaitable, Iterable, List


async def cancel_and_wait(tasks: Iterable[asyncio.Future]) -> None:
    """Cancel every unfinished task and wait until all of them have settled."""
    tasks = list(tasks)
    for task in tasks:
        if not task.done():
            task.cancel()
    if tasks:
        # Also collects exceptions of tasks that already failed
        await asyncio.gather(*tasks, return_exceptions=True)


async def gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    """
    Run awaitables concurrently and return their results in argument order.

    If one of them fails (or the caller is cancelled) the siblings are
    cancelled and reaped before the exception propagates.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        await cancel_and_wait(tasks)
        raise
