"""Tests for the progress event emitter."""
import pytest

from pdrive.utils.events import EventEmitter


@pytest.mark.asyncio
async def test_sync_and_async_listeners():
    emitter = EventEmitter()
    seen = []

    async def async_listener(value):
        seen.append(("async", value))

    emitter.on("notice", lambda value: seen.append(("sync", value)))
    emitter.on("notice", async_listener)

    await emitter.emit("notice", "hello")

    assert seen == [("sync", "hello"), ("async", "hello")]


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_upload():
    emitter = EventEmitter()
    seen = []

    def broken(value):
        raise RuntimeError("display gone")

    emitter.on("notice", broken)
    emitter.on("notice", seen.append)

    await emitter.emit("notice", "still delivered")

    assert seen == ["still delivered"]


@pytest.mark.asyncio
async def test_listeners_run_in_subscription_order():
    emitter = EventEmitter()
    seen = []

    emitter.on("part_start", lambda n: seen.append(("display", n)))
    emitter.on("part_start", lambda n: seen.append(("log", n)))
    await emitter.emit("part_start", 1)
    await emitter.emit("part_complete", 1)

    assert seen == [("display", 1), ("log", 1)]
