"""Karahi Client - async HTTP client and pollers for the ordering API."""

from karahi_client.alerts import CHIME_TONES, Notifier, TerminalNotifier, Tone
from karahi_client.api import OrderAPIClient, OrderAPIError
from karahi_client.notifications import AdminNotificationPoller
from karahi_client.tracking import OrderTrackingPoller, TrackingSession, active_order

__all__ = [
    # API
    "OrderAPIClient",
    "OrderAPIError",
    # Alerts
    "CHIME_TONES",
    "Notifier",
    "TerminalNotifier",
    "Tone",
    # Pollers
    "AdminNotificationPoller",
    "OrderTrackingPoller",
    "TrackingSession",
    "active_order",
]
