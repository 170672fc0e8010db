"""
Module: dropbot/scheduler/registry.py

Defines SubscriptionRegistry: the in-memory, lock-guarded store of channel subscriptions.
Command handlers register and unregister channels while the poller asks it which
channels are due; the due check marks those channels as triggered in the same
critical section so no interval is ever reported twice.
"""
import threading
from datetime import timedelta
from typing import Optional

from dropbot.config import MIN_INTERVAL
from dropbot.errors import InvalidInterval, NotSubscribed
from dropbot.scheduler.clock import Clock, SystemClock
from dropbot.scheduler.subscription import ChannelSubscription
from dropbot.utils import log_message, format_interval


class SubscriptionRegistry:
    """
    Thread-safe mapping of channel IDs to their ChannelSubscription.

    Responsibilities:
      - Validate intervals against the configured minimum on registration.
      - Replace an existing subscription when a channel registers again.
      - Report due channels and reset their timers atomically.

    Attributes:
      clock: Time source used to stamp new registrations.
      min_interval (timedelta): Shortest interval accepted by register().
    """
    def __init__(self, clock: Optional[Clock] = None, min_interval: timedelta = MIN_INTERVAL):
        """
        Initialize an empty registry.

        Args:
            clock: Object with a now() method; defaults to SystemClock.
            min_interval (timedelta): Minimum allowed subscription interval.
        """
        self.clock = clock or SystemClock()
        self.min_interval = min_interval
        self._lock = threading.Lock()
        self._subscriptions = {}

    def register(self, channel_id, interval):
        """
        Subscribe a channel, replacing any previous subscription for it.

        The new subscription's clock starts now, so the first drop happens one
        full `interval` after this call.

        Raises:
            InvalidInterval: If `interval` is shorter than `min_interval`.
        """
        if interval < self.min_interval:
            raise InvalidInterval(interval, self.min_interval)

        with self._lock:
            replaced = channel_id in self._subscriptions
            self._subscriptions[channel_id] = ChannelSubscription(
                channel_id, interval, self.clock.now()
            )

        action = "Re-subscribed" if replaced else "Subscribed"
        log_message(f"{action} channel {channel_id} every {format_interval(interval)}", "info")

    def unregister(self, channel_id):
        """
        Remove a channel's subscription.

        Raises:
            NotSubscribed: If the channel has no subscription.
        """
        with self._lock:
            if channel_id not in self._subscriptions:
                raise NotSubscribed(channel_id)
            del self._subscriptions[channel_id]

        log_message(f"Unsubscribed channel {channel_id}", "info")

    def snapshot_due(self, now):
        """
        Return the IDs of every channel due at `now` and mark them triggered at `now`.

        The result has no particular order.
        """
        due = []
        with self._lock:
            for channel_id, sub in self._subscriptions.items():
                if sub.is_due(now):
                    sub.mark_triggered(now)
                    due.append(channel_id)
        return due

    def is_subscribed(self, channel_id):
        with self._lock:
            return channel_id in self._subscriptions

    def __len__(self):
        with self._lock:
            return len(self._subscriptions)
