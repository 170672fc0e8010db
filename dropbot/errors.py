"""
Module: dropbot/errors.py

Exception types raised by the subscription registry and file delivery.
Messages are written to be shown to Discord users as-is.
"""


class DropBotError(Exception):
    """Base class for errors the command layer reports back to users."""


class InvalidInterval(DropBotError):
    """
    Raised by SubscriptionRegistry.register when the interval is below the minimum.

    Attributes:
        interval (timedelta): The rejected interval.
        minimum (timedelta): The configured minimum interval.
    """
    def __init__(self, interval, minimum):
        self.interval = interval
        self.minimum = minimum
        super().__init__("Interval is too short, pick something longer.")


class NotSubscribed(DropBotError):
    """Raised by SubscriptionRegistry.unregister when the channel has no subscription."""
    def __init__(self, channel_id):
        self.channel_id = channel_id
        super().__init__("You're not subscribed.")


class DeliveryError(DropBotError):
    """Raised by a dispatcher when a file could not be delivered to a channel."""
