import asyncio
from typing import Awaitable, Optional, TypeVar

from app.platform.exceptions import AnalysisCancelled

T = TypeVar("T")


class CancellationToken:
    """
    Stop signal shared between a running analysis and whoever may stop it.

    Blocking steps are wrapped in ``guard`` so that cancelling the token
    interrupts them mid-flight instead of waiting for a timeout.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "stop requested") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise AnalysisCancelled(self.reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first."""
        work = asyncio.ensure_future(awaitable)
        if self.cancelled:
            work.cancel()
            raise AnalysisCancelled(self.reason)

        stop = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            stop.cancel()

        if work.done():
            return work.result()

        work.cancel()
        try:
            await work
        except asyncio.CancelledError:
            pass
        raise AnalysisCancelled(self.reason)
