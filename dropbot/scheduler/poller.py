"""
Module: dropbot/scheduler/poller.py

Defines SubscriptionPoller: wakes on a fixed cadence, asks the registry which channels
are due, and hands each one to the dispatcher in its own asyncio task. Deliveries are
fire-and-forget; their failures are logged and never reach the poll loop.
"""
import asyncio
import contextlib
import enum
from datetime import timedelta
from typing import Optional

from nextcord.ext import tasks

from dropbot.config import POLL_INTERVAL, MAX_CONCURRENT_DELIVERIES
from dropbot.errors import DeliveryError
from dropbot.delivery import Dispatcher
from dropbot.scheduler.clock import Clock, SystemClock
from dropbot.scheduler.registry import SubscriptionRegistry
from dropbot.utils import log_message


class PollerState(enum.Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"


class SubscriptionPoller:
    """
    Periodic due-check and fan-out loop over a SubscriptionRegistry.

    Attributes:
      registry: SubscriptionRegistry queried on every tick.
      dispatcher: Object with an async deliver(channel_id) method.
      clock: Time source passed to snapshot_due().
      poll_interval (timedelta): Delay between ticks.
      state (PollerState): IDLE between ticks, DISPATCHING while spawning deliveries.
    """
    def __init__(
        self,
        registry: SubscriptionRegistry,
        dispatcher: Dispatcher,
        clock: Optional[Clock] = None,
        poll_interval: timedelta = POLL_INTERVAL,
        max_concurrency: Optional[int] = MAX_CONCURRENT_DELIVERIES,
    ):
        """
        Initialize the poller. The loop is not started until start() is called.

        Args:
            registry: SubscriptionRegistry holding the subscriptions.
            dispatcher: Delivery collaborator implementing deliver(channel_id).
            clock: Object with a now() method; defaults to SystemClock.
            poll_interval (timedelta): Tick cadence.
            max_concurrency (int): Cap on simultaneous deliveries, 0 or None for no cap.
        """
        self.registry = registry
        self.dispatcher = dispatcher
        self.clock = clock or SystemClock()
        self.poll_interval = poll_interval
        self.max_concurrency = max_concurrency or None
        self.state = PollerState.IDLE
        self._semaphore = None
        self._in_flight = set()
        self._loop = None

    @property
    def in_flight(self):
        """Delivery tasks spawned by earlier ticks that have not finished yet."""
        return frozenset(self._in_flight)

    def start(self):
        """
        Start ticking every poll_interval on the running event loop. No-op if already running.
        """
        if self._loop is None:
            self._loop = tasks.loop(seconds=self.poll_interval.total_seconds())(self._run_tick)
        if not self._loop.is_running():
            log_message(f"Starting subscription poller, ticking every {self.poll_interval}", "info")
            self._loop.start()

    def stop(self):
        """
        Cancel the poll loop. In-flight deliveries are left to finish on their own.
        """
        if self._loop is not None and self._loop.is_running():
            self._loop.cancel()
            log_message("Subscription poller stopped", "warning")

    def is_running(self):
        return self._loop is not None and self._loop.is_running()

    async def _run_tick(self):
        # An exception escaping here would stop the nextcord loop for good.
        try:
            await self.tick()
        except Exception as e:
            self.state = PollerState.IDLE
            log_message(f"Error in subscription poller tick: {e}", "error")

    async def tick(self):
        """
        Run one due-check and spawn a delivery task for every due channel.

        Returns the list of channel IDs dispatched this tick, without waiting
        for any of the deliveries to complete.
        """
        due = self.registry.snapshot_due(self.clock.now())
        if not due:
            return due

        self.state = PollerState.DISPATCHING
        log_message(f"Dispatching drops to {len(due)} channel(s): {due}", "debug")
        for channel_id in due:
            task = asyncio.create_task(self._deliver(channel_id))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
        self.state = PollerState.IDLE
        return due

    async def _deliver(self, channel_id):
        """
        Deliver to one channel, logging and swallowing any failure.
        """
        try:
            async with self._delivery_slot():
                await self.dispatcher.deliver(channel_id)
            log_message(f"Delivered scheduled drop to channel {channel_id}", "info")
        except DeliveryError as e:
            log_message(f"Scheduled drop to channel {channel_id} failed: {e}", "warning")
        except asyncio.CancelledError:
            log_message(f"Scheduled drop to channel {channel_id} cancelled", "warning")
        except Exception as e:
            log_message(f"Unexpected error delivering to channel {channel_id}: {e}", "error")

    def _delivery_slot(self):
        if self.max_concurrency is None:
            return contextlib.nullcontext()
        # Created lazily so it binds to the loop the deliveries run on
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)
        return self._semaphore
