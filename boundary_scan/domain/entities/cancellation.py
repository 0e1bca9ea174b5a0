"""
Domain Entity: Cancellation Token

Shared cancellation signal for one scan run. Every task of the run checks
it before each classifier call and before each emission.
"""

import asyncio
from typing import Optional

from ..exceptions import RunCancelled


class CancellationToken:
    """
    Observable one-way flag, equivalent to an abort signal.

    The underlying asyncio.Event is created lazily so a token can be built
    outside a running event loop (e.g. by a CLI before asyncio.run).
    """

    def __init__(self):
        self._cancelled = False
        self._reason: Optional[str] = None
        self._event: Optional[asyncio.Event] = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        """Set the flag. Later calls keep the first reason."""
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RunCancelled(self._reason or "cancelled")

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()
