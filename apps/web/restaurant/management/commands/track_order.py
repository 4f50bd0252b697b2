"""
Follow one order from a terminal until it is done.

Usage:
    python apps/web/manage.py track_order --uid <firebase uid>
    python apps/web/manage.py track_order <order id> --uid <firebase uid>
    python apps/web/manage.py track_order --once

Without an order id, follows the caller's most recent pending or preparing
order.
"""

import asyncio
import logging
import math
import os
from typing import Any

from django.core.management.base import BaseCommand, CommandError

import httpx
from karahi_client import (
    OrderAPIClient,
    OrderAPIError,
    OrderTrackingPoller,
    TerminalNotifier,
    TrackingSession,
    active_order,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class Command(BaseCommand):
    help = "Track an order's status and preparation countdown"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "order_id",
            nargs="?",
            help="Order to follow (default: your most recent active order)",
        )
        parser.add_argument(
            "--once",
            action="store_true",
            help="Show the current status and exit",
        )
        parser.add_argument(
            "--poll-interval",
            type=float,
            default=OrderTrackingPoller.POLL_INTERVAL,
            help="Polling interval in seconds (default: 3)",
        )
        parser.add_argument(
            "--base-url",
            default=os.environ.get("KARAHI_API_URL", DEFAULT_BASE_URL),
            help="API server root (default: $KARAHI_API_URL or localhost:8000)",
        )
        parser.add_argument(
            "--uid",
            default=os.environ.get("KARAHI_FIREBASE_UID"),
            help="Your Firebase UID (default: $KARAHI_FIREBASE_UID)",
        )

    def handle(self, *_args: Any, **options: Any) -> None:
        if not options["uid"]:
            raise CommandError("A Firebase UID is required (--uid)")

        self._last_line = ""
        try:
            asyncio.run(self.track(**options))
        except KeyboardInterrupt:
            self.stdout.write("Stopped.")

    async def track(
        self,
        *,
        base_url: str,
        uid: str,
        order_id: str | None,
        poll_interval: float,
        once: bool,
        **_options: Any,
    ) -> None:
        async with OrderAPIClient(base_url, uid) as client:
            if order_id is None:
                order_id = await self._find_active_order(client)
                if order_id is None:
                    self.stdout.write("No active orders.")
                    return

            tracker = OrderTrackingPoller(
                client,
                order_id,
                TrackingSession(),
                TerminalNotifier(self.stdout),
                poll_interval=poll_interval,
            )

            if once:
                if not await tracker.poll_once():
                    raise CommandError(f"Could not load order {order_id}")
                self._report(tracker)
                return

            async with tracker:
                while not tracker.finished.is_set():
                    try:
                        await asyncio.wait_for(
                            tracker.finished.wait(), timeout=tracker.tick_interval
                        )
                    except TimeoutError:
                        pass
                    self._report(tracker)

    async def _find_active_order(self, client: OrderAPIClient) -> str | None:
        try:
            orders = await client.user_orders()
        except (httpx.HTTPError, OrderAPIError) as e:
            raise CommandError(f"Could not load your orders: {e}") from e

        order = active_order(orders)
        return str(order.id) if order else None

    def _report(self, tracker: OrderTrackingPoller) -> None:
        """Print a status line when it changes."""
        order = tracker.order
        if order is None:
            return

        line = f"Order {order.order_number}: {order.status.value}"
        if order.rejection_reason:
            line += f" ({order.rejection_reason})"
        if tracker.countdown_seconds is not None and not order.is_terminal:
            minutes_left = math.ceil(tracker.countdown_seconds / 60)
            line += f", about {minutes_left} min left"

        if line != self._last_line:
            self.stdout.write(line)
            self._last_line = line
