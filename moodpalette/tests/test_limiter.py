import asyncio

import pytest

from ..services.limiter import ConcurrencyLimiter


def test_limiter_bounds_concurrency_and_admits_in_order() -> None:
    asyncio.run(_run_limited_tasks())


async def _run_limited_tasks() -> None:
    limiter = ConcurrencyLimiter(2)
    started: list[int] = []

    def make_task(index: int):
        async def task() -> int:
            started.append(index)
            assert limiter.active <= 2
            await asyncio.sleep(0.01)
            return index * 10

        return task

    results = await asyncio.gather(*(limiter.schedule(make_task(i)) for i in range(8)))

    assert results == [i * 10 for i in range(8)]
    assert started == list(range(8))
    assert limiter.peak == 2
    assert limiter.active == 0


def test_limiter_releases_slot_when_task_fails() -> None:
    async def scenario() -> None:
        limiter = ConcurrencyLimiter(1)

        async def broken() -> None:
            raise RuntimeError("boom")

        async def fine() -> str:
            return "done"

        with pytest.raises(RuntimeError):
            await limiter.schedule(broken)
        assert await limiter.schedule(fine) == "done"

    asyncio.run(scenario())


def test_limiter_rejects_zero_capacity() -> None:
    with pytest.raises(ValueError):
        ConcurrencyLimiter(0)
