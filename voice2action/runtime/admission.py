"""Admission queue bounding how many requests are processed at once.

Every inbound request (text or voice) is admitted here before it touches the
intent resolver or the confirmation store. Waiters are served strictly in
arrival order; a released slot is handed directly to the oldest waiter so a
late arrival can never overtake it.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TypeVar

from loguru import logger

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class AdmissionStatus:
    active: int
    queued: int
    max: int


class AdmissionQueue:
    def __init__(self, max_concurrent: int = 1) -> None:
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self._max = max_concurrent
        self._active = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def max_concurrent(self) -> int:
        return self._max

    def status(self) -> AdmissionStatus:
        queued = sum(1 for fut in self._waiters if not fut.done())
        return AdmissionStatus(active=self._active, queued=queued, max=self._max)

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one processing slot for the duration of the block."""
        await self._admit()
        try:
            yield
        finally:
            self._release()

    async def run_exclusively(self, task: Callable[[], Awaitable[T]]) -> T:
        """Run *task* once a slot is free; errors propagate after release."""
        async with self.slot():
            return await task()

    async def _admit(self) -> None:
        if self._active < self._max and not self._waiters:
            self._active += 1
            return

        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        logger.debug(f"Request queued (active={self._active}, queued={len(self._waiters)})")
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # Slot was already handed over; pass it on.
                self._release()
            else:
                try:
                    self._waiters.remove(fut)
                except ValueError:
                    pass
            raise

    def _release(self) -> None:
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                # Ownership of the slot moves to the waiter; active is unchanged.
                fut.set_result(None)
                return
        self._active -= 1
