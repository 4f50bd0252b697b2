"""
Watch for new orders from a terminal: rings the bell when one arrives.

Usage:
    python apps/web/manage.py watch_orders --uid <admin firebase uid>
    python apps/web/manage.py watch_orders --once
    python apps/web/manage.py watch_orders --base-url https://karahi.example.com
"""

import asyncio
import logging
import os
from typing import Any

from django.core.management.base import BaseCommand, CommandError

import httpx
from karahi_client import (
    AdminNotificationPoller,
    OrderAPIClient,
    OrderAPIError,
    TerminalNotifier,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class Command(BaseCommand):
    help = "Poll the order API and alert on new pending orders (admin only)"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--once",
            action="store_true",
            help="Poll once and exit (default: poll every 10s)",
        )
        parser.add_argument(
            "--interval",
            type=float,
            default=AdminNotificationPoller.POLL_INTERVAL,
            help="Polling interval in seconds (default: 10)",
        )
        parser.add_argument(
            "--base-url",
            default=os.environ.get("KARAHI_API_URL", DEFAULT_BASE_URL),
            help="API server root (default: $KARAHI_API_URL or localhost:8000)",
        )
        parser.add_argument(
            "--uid",
            default=os.environ.get("KARAHI_FIREBASE_UID"),
            help="Admin Firebase UID (default: $KARAHI_FIREBASE_UID)",
        )

    def handle(self, *_args: Any, **options: Any) -> None:
        if not options["uid"]:
            raise CommandError("An admin Firebase UID is required (--uid)")

        try:
            asyncio.run(self.watch(**options))
        except KeyboardInterrupt:
            self.stdout.write("Stopped.")

    async def watch(
        self,
        *,
        base_url: str,
        uid: str,
        interval: float,
        once: bool,
        **_options: Any,
    ) -> None:
        async with OrderAPIClient(base_url, uid) as client:
            await self._check_admin(client)

            poller = AdminNotificationPoller(
                client, TerminalNotifier(self.stdout), interval=interval
            )
            self.stdout.write(f"Watching {base_url} for new orders...")

            while True:
                if await poller.poll_once():
                    self.stdout.write(
                        f"Pending orders: {poller.pending_order_count} "
                        f"(unseen: {poller.new_orders_count})"
                    )

                if once:
                    break

                await asyncio.sleep(interval)

    async def _check_admin(self, client: OrderAPIClient) -> None:
        """Fail fast unless the caller is a synced admin."""
        try:
            user = await client.get_user()
        except (httpx.HTTPError, OrderAPIError) as e:
            raise CommandError(f"Could not load user {client.firebase_uid}: {e}") from e

        if not user.is_admin:
            raise CommandError(f"{user.email} is not an admin")
