from __future__ import annotations

import asyncio
import threading

import pytest

from keyreg.registry import KeyedRegistry


def test_callback_waiter_resolves_after_register() -> None:
    reg: KeyedRegistry[str] = KeyedRegistry()
    received: list[str] = []
    reg.wait_for_item_by_name("x", received.append)
    assert received == []
    assert reg.pending_waiters("x") == 1

    reg.register("x", "v")
    assert received == ["v"]
    assert reg.pending_waiters("x") == 0

    reg.register("x", "w")
    assert received == ["v"]


def test_callback_waiter_on_existing_item_is_not_queued() -> None:
    reg: KeyedRegistry[str] = KeyedRegistry()
    reg.register("x", "v")
    received: list[str] = []
    reg.wait_for_item_by_name("x", received.append)
    assert received == ["v"]
    assert reg.pending_waiters() == 0

    reg.register("x", "w")
    assert received == ["v"]


def test_multiple_waiters_resolve_in_subscription_order() -> None:
    reg: KeyedRegistry[int] = KeyedRegistry()
    calls: list[tuple[str, int]] = []
    reg.wait_for_item_by_name("x", lambda item: calls.append(("first", item)))
    reg.wait_for_item_by_name("x", lambda item: calls.append(("second", item)))
    reg.wait_for_item_by_name("y", lambda item: calls.append(("other", item)))

    reg.register("x", 5)
    assert calls == [("first", 5), ("second", 5)]
    assert reg.pending_waiters() == 1


def test_unregister_keeps_pending_waiters() -> None:
    reg: KeyedRegistry[int] = KeyedRegistry()
    received: list[int] = []
    reg.wait_for_item_by_name("x", received.append)
    reg.unregister("x")
    assert reg.pending_waiters("x") == 1
    reg.register("x", 1)
    assert received == [1]


def test_waiter_may_reenter_registry() -> None:
    reg: KeyedRegistry[int] = KeyedRegistry()
    reg.wait_for_item_by_name("a", lambda item: reg.register("b", item + 1))
    reg.register("a", 1)
    assert reg.get_item_by_name("b") == 2


def test_async_wait_returns_existing_item() -> None:
    reg: KeyedRegistry[str] = KeyedRegistry()
    reg.register("x", "v")
    assert asyncio.run(reg.wait_for_item("x")) == "v"


def test_async_waiters_resolve_once_after_register() -> None:
    reg: KeyedRegistry[str] = KeyedRegistry()

    async def scenario() -> list[str]:
        first = asyncio.create_task(reg.wait_for_item("x"))
        second = asyncio.create_task(reg.wait_for_item("x"))
        await asyncio.sleep(0)
        assert not first.done()
        assert not second.done()
        assert reg.pending_waiters("x") == 2
        reg.register("x", "v")
        return list(await asyncio.gather(first, second))

    assert asyncio.run(scenario()) == ["v", "v"]
    assert reg.pending_waiters() == 0


def test_async_wait_timeout_discards_waiter() -> None:
    reg: KeyedRegistry[str] = KeyedRegistry()

    async def scenario() -> None:
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(reg.wait_for_item("never"), timeout=0.01)

    asyncio.run(scenario())
    assert reg.pending_waiters("never") == 0


def test_async_wait_resolved_from_another_thread() -> None:
    reg: KeyedRegistry[int] = KeyedRegistry()

    async def scenario() -> int:
        task = asyncio.create_task(reg.wait_for_item("x"))
        await asyncio.sleep(0)
        worker = threading.Thread(target=reg.register, args=("x", 42))
        worker.start()
        result = await asyncio.wait_for(task, timeout=5)
        worker.join()
        return result

    assert asyncio.run(scenario()) == 42


def test_failing_waiter_does_not_drop_later_waiters() -> None:
    reg: KeyedRegistry[int] = KeyedRegistry()
    received: list[int] = []

    def broken(item: int) -> None:
        raise RuntimeError("boom")

    reg.wait_for_item_by_name("x", broken)
    reg.wait_for_item_by_name("x", received.append)
    with pytest.raises(RuntimeError, match="boom"):
        reg.register("x", 1)
    assert received == [1]
    assert reg.get_item_by_name("x") == 1
    assert reg.pending_waiters("x") == 0
