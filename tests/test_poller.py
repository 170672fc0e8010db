from __future__ import annotations

import asyncio
from datetime import timedelta

from dropbot.errors import DeliveryError
from dropbot.scheduler import PollerState, SubscriptionPoller, SubscriptionRegistry

MINUTE = timedelta(minutes=1)


class FakeDispatcher:
    def __init__(self) -> None:
        self.delivered: list[int] = []
        self.failing: dict[int, BaseException] = {}
        self.gate: asyncio.Event | None = None
        self.active = 0
        self.peak = 0

    async def deliver(self, channel_id: int) -> None:
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if channel_id in self.failing:
                raise self.failing[channel_id]
            self.delivered.append(channel_id)
        finally:
            self.active -= 1


def _make(clock, **kwargs) -> tuple[SubscriptionRegistry, FakeDispatcher, SubscriptionPoller]:
    registry = SubscriptionRegistry(clock=clock, min_interval=MINUTE)
    dispatcher = FakeDispatcher()
    poller = SubscriptionPoller(registry, dispatcher, clock=clock, **kwargs)
    return registry, dispatcher, poller


async def _drain(poller: SubscriptionPoller) -> None:
    await asyncio.gather(*poller.in_flight)


def test_tick_dispatches_each_due_channel(clock) -> None:
    registry, dispatcher, poller = _make(clock)
    registry.register(7, MINUTE)
    registry.register(8, timedelta(hours=1))

    async def scenario() -> None:
        assert await poller.tick() == []
        clock.advance(seconds=61)
        assert await poller.tick() == [7]
        await _drain(poller)
        # Nothing new is due on the next tick
        clock.advance(seconds=15)
        assert await poller.tick() == []

    asyncio.run(scenario())
    assert dispatcher.delivered == [7]


def test_tick_does_not_wait_for_deliveries(clock) -> None:
    registry, dispatcher, poller = _make(clock)
    registry.register(7, MINUTE)
    registry.register(8, MINUTE)

    async def scenario() -> None:
        dispatcher.gate = asyncio.Event()
        clock.advance(minutes=1)
        due = await poller.tick()
        assert sorted(due) == [7, 8]
        assert poller.state is PollerState.IDLE
        assert len(poller.in_flight) == 2
        assert dispatcher.delivered == []

        # The next tick runs while the first deliveries are still hung
        clock.advance(minutes=1)
        assert sorted(await poller.tick()) == [7, 8]
        assert len(poller.in_flight) == 4

        dispatcher.gate.set()
        await _drain(poller)
        assert poller.in_flight == frozenset()

    asyncio.run(scenario())
    assert sorted(dispatcher.delivered) == [7, 7, 8, 8]


def test_delivery_failures_are_logged_and_isolated(clock, capsys) -> None:
    registry, dispatcher, poller = _make(clock)
    for channel_id in (1, 2, 3):
        registry.register(channel_id, MINUTE)
    dispatcher.failing[1] = DeliveryError("No files to send.")
    dispatcher.failing[2] = RuntimeError("boom")

    async def scenario() -> None:
        clock.advance(minutes=1)
        await poller.tick()
        await _drain(poller)
        # Failed channels are not retried early
        clock.advance(seconds=30)
        assert await poller.tick() == []
        clock.advance(seconds=30)
        assert sorted(await poller.tick()) == [1, 2, 3]
        await _drain(poller)

    asyncio.run(scenario())
    assert dispatcher.delivered == [3, 3]
    out = capsys.readouterr().out
    assert "Scheduled drop to channel 1 failed: No files to send." in out
    assert "Unexpected error delivering to channel 2: boom" in out


def test_max_concurrency_caps_parallel_deliveries(clock) -> None:
    registry, dispatcher, poller = _make(clock, max_concurrency=2)
    for channel_id in range(6):
        registry.register(channel_id, MINUTE)

    async def scenario() -> None:
        dispatcher.gate = asyncio.Event()
        clock.advance(minutes=1)
        await poller.tick()
        for _ in range(5):
            await asyncio.sleep(0)
        assert dispatcher.active == 2
        dispatcher.gate.set()
        await _drain(poller)

    asyncio.run(scenario())
    assert dispatcher.peak == 2
    assert sorted(dispatcher.delivered) == list(range(6))


def test_unbounded_by_default(clock) -> None:
    registry, dispatcher, poller = _make(clock, max_concurrency=0)
    for channel_id in range(5):
        registry.register(channel_id, MINUTE)

    async def scenario() -> None:
        dispatcher.gate = asyncio.Event()
        clock.advance(minutes=1)
        await poller.tick()
        for _ in range(5):
            await asyncio.sleep(0)
        assert dispatcher.active == 5
        dispatcher.gate.set()
        await _drain(poller)

    asyncio.run(scenario())


def test_run_tick_swallows_registry_errors(clock, capsys) -> None:
    class BrokenRegistry:
        def snapshot_due(self, now):
            raise RuntimeError("registry exploded")

    poller = SubscriptionPoller(BrokenRegistry(), FakeDispatcher(), clock=clock)
    asyncio.run(poller._run_tick())
    assert poller.state is PollerState.IDLE
    assert "Error in subscription poller tick: registry exploded" in capsys.readouterr().out


def test_start_runs_ticks_until_stopped(clock) -> None:
    registry, dispatcher, poller = _make(clock, poll_interval=timedelta(milliseconds=10))
    registry.register(7, MINUTE)
    clock.advance(minutes=1)

    async def scenario() -> None:
        assert not poller.is_running()
        poller.start()
        poller.start()
        assert poller.is_running()
        await asyncio.sleep(0.1)
        poller.stop()
        await asyncio.sleep(0.05)
        assert not poller.is_running()
        await _drain(poller)

    asyncio.run(scenario())
    # Repeated ticks inside one interval still deliver only once
    assert dispatcher.delivered == [7]
