from __future__ import annotations

import asyncio

import pytest

from tradebook_api.infrastructure.concurrency.keyed_lock import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_exclusive() -> None:
    locks = KeyedLock()
    order: list[str] = []

    async def worker(name: str) -> None:
        async with locks.hold(("owner-1", "TCS")):
            order.append(f"{name}:in")
            await asyncio.sleep(0)
            order.append(f"{name}:out")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a:in", "a:out", "b:in", "b:out"]
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_different_keys_do_not_block_each_other() -> None:
    locks = KeyedLock()
    entered = asyncio.Event()

    async with locks.hold(("owner-1", "TCS")):
        async with locks.hold(("owner-1", "INFY")):
            entered.set()
        assert len(locks) == 1

    assert entered.is_set()
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_released_when_body_raises() -> None:
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        async with locks.hold("k"):
            raise RuntimeError("boom")

    async with asyncio.timeout(1):
        async with locks.hold("k"):
            pass
    assert len(locks) == 0
