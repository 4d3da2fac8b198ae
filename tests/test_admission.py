import asyncio

import pytest

from product_crawler.crawler.admission import AdmissionController


def test_acquire_blocks_at_capacity():
    async def scenario():
        gate = AdmissionController(1)
        await gate.acquire()
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(gate.acquire(), timeout=0.05)
        assert gate.in_use == 1

        gate.release()
        await asyncio.wait_for(gate.acquire(), timeout=1)
        assert gate.in_use == 1
        gate.release()
        return gate

    gate = asyncio.run(scenario())
    assert gate.in_use == 0
    assert gate.peak_in_use == 1


def test_release_wakes_a_waiter():
    async def scenario():
        gate = AdmissionController(1)
        order = []

        async def worker(name):
            async with gate:
                order.append(name)
                await asyncio.sleep(0.01)

        await asyncio.gather(worker("a"), worker("b"), worker("c"))
        return gate, order

    gate, order = asyncio.run(scenario())
    assert sorted(order) == ["a", "b", "c"]
    assert gate.peak_in_use == 1


def test_change_callback_sees_token_count():
    seen = []

    async def scenario():
        gate = AdmissionController(2, on_change=seen.append)
        await gate.acquire()
        await gate.acquire()
        assert gate.available == 0
        gate.release()
        gate.release()

    asyncio.run(scenario())
    assert seen == [1, 2, 1, 0]


def test_invalid_usage():
    with pytest.raises(ValueError):
        AdmissionController(0)
    with pytest.raises(RuntimeError):
        AdmissionController(1).release()
