"""
Module: dropbot/scheduler/subscription.py

Provides the ChannelSubscription class holding the recurring drop state for one channel.
"""


class ChannelSubscription:
    """
    Recurring drop schedule for a single channel.

    Instances are owned by SubscriptionRegistry and only mutated under its lock.

    Attributes:
        channel_id (int): Discord channel ID receiving the drops.
        interval (timedelta): Minimum time between two drops.
        last_triggered (datetime): When the subscription last fired, or when it
            was registered if it has not fired yet.
    """
    __slots__ = ("channel_id", "interval", "last_triggered")

    def __init__(self, channel_id, interval, last_triggered):
        self.channel_id = channel_id
        self.interval = interval
        self.last_triggered = last_triggered

    def is_due(self, now):
        """
        Return True once at least `interval` has elapsed since `last_triggered`.
        A `now` earlier than `last_triggered` is never due.
        """
        return now - self.last_triggered >= self.interval

    def mark_triggered(self, now):
        # last_triggered never moves backwards
        if now > self.last_triggered:
            self.last_triggered = now

    def __repr__(self):
        return (
            f"ChannelSubscription(channel_id={self.channel_id!r}, "
            f"interval={self.interval!r}, last_triggered={self.last_triggered!r})"
        )
