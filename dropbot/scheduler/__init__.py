"""
Package: dropbot/scheduler

Provides ChannelSubscription, SubscriptionRegistry, SubscriptionPoller and the Clock types.
"""
from .clock import Clock, SystemClock
from .subscription import ChannelSubscription
from .registry import SubscriptionRegistry
from .poller import PollerState, SubscriptionPoller
