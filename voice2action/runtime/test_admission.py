import asyncio

import pytest

from voice2action.runtime.admission import AdmissionQueue


def test_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        AdmissionQueue(0)


def test_never_exceeds_max_concurrent() -> None:
    async def scenario() -> int:
        queue = AdmissionQueue(max_concurrent=2)
        running = 0
        peak = 0

        async def work() -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        await asyncio.gather(*(queue.run_exclusively(work) for _ in range(8)))
        assert queue.status().active == 0
        return peak

    assert asyncio.run(scenario()) == 2


def test_waiters_are_admitted_in_arrival_order() -> None:
    async def scenario() -> list[int]:
        queue = AdmissionQueue(max_concurrent=1)
        gate = asyncio.Event()
        order: list[int] = []

        async def first() -> None:
            await gate.wait()
            order.append(0)

        def make(i: int):
            async def work() -> None:
                order.append(i)
            return work

        tasks = [asyncio.create_task(queue.run_exclusively(first))]
        await asyncio.sleep(0)
        for i in range(1, 5):
            tasks.append(asyncio.create_task(queue.run_exclusively(make(i))))
            await asyncio.sleep(0)

        status = queue.status()
        assert (status.active, status.queued, status.max) == (1, 4, 1)

        gate.set()
        await asyncio.gather(*tasks)
        return order

    assert asyncio.run(scenario()) == [0, 1, 2, 3, 4]


def test_failure_releases_slot_and_propagates() -> None:
    async def scenario() -> None:
        queue = AdmissionQueue(max_concurrent=1)

        async def boom() -> None:
            raise RuntimeError("collaborator down")

        async def ok() -> str:
            return "done"

        with pytest.raises(RuntimeError, match="collaborator down"):
            await queue.run_exclusively(boom)
        assert queue.status().active == 0
        assert await queue.run_exclusively(ok) == "done"

    asyncio.run(scenario())


def test_second_request_starts_after_first_completes() -> None:
    async def scenario() -> list[str]:
        queue = AdmissionQueue(max_concurrent=1)
        events: list[str] = []

        async def first() -> None:
            events.append("first:start")
            await asyncio.sleep(0.01)
            events.append("first:end")
            raise ValueError("first failed")

        async def second() -> None:
            events.append("second:start")

        results = await asyncio.gather(
            queue.run_exclusively(first),
            queue.run_exclusively(second),
            return_exceptions=True,
        )
        assert isinstance(results[0], ValueError)
        return events

    assert asyncio.run(scenario()) == ["first:start", "first:end", "second:start"]


def test_cancelled_waiter_does_not_leak_a_slot() -> None:
    async def scenario() -> None:
        queue = AdmissionQueue(max_concurrent=1)
        gate = asyncio.Event()

        async def hold() -> None:
            await gate.wait()

        async def never() -> None:
            raise AssertionError("cancelled waiter must not run")

        holder = asyncio.create_task(queue.run_exclusively(hold))
        await asyncio.sleep(0)
        waiter = asyncio.create_task(queue.run_exclusively(never))
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        gate.set()
        await holder
        status = queue.status()
        assert (status.active, status.queued) == (0, 0)

    asyncio.run(scenario())
