"""
Admin notification poller - chime when new pending orders arrive.

Polls the recent-orders list on a fixed interval and compares the pending
orders against what the admin has already been told about:

- First poll after start: everything pending is treated as already seen.
- Later polls: an order is "truly new" when it is pending, not yet seen,
  and was not pending on the previous poll. Truly new orders trigger the
  chime and a toast exactly once.
- mark_orders_seen() acknowledges every currently pending order.

Best effort: a failed poll is skipped and the next tick tries again, so an
order that is created and resolved between two polls is never announced.
"""

import asyncio
import logging
from collections.abc import Iterable
from uuid import UUID

import httpx
from karahi_schemas import OrderSchema, OrderStatus

from karahi_client.alerts import CHIME_TONES, Notifier, TerminalNotifier
from karahi_client.api import OrderAPIClient, OrderAPIError

logger = logging.getLogger(__name__)


class AdminNotificationPoller:
    """
    Near-real-time new-order alerts for the admin dashboard.

    All state lives on the instance: create one per dashboard session and
    discard it on stop.

    Usage:
        async with AdminNotificationPoller(client) as poller:
            ...
            poller.mark_orders_seen()
    """

    POLL_INTERVAL = 10.0
    FETCH_LIMIT = 100

    def __init__(
        self,
        client: OrderAPIClient,
        notifier: Notifier | None = None,
        *,
        interval: float = POLL_INTERVAL,
    ) -> None:
        self._client = client
        self._notifier = notifier or TerminalNotifier()
        self.interval = interval

        self.seen_ids: set[UUID] = set()
        self.previous_pending_ids: list[UUID] = []
        self.first_poll = True
        self.pending_order_count = 0
        self.new_orders_count = 0

        self._task: asyncio.Task[None] | None = None

    # =========================================================================
    # Polling
    # =========================================================================

    async def poll_once(self) -> bool:
        """
        Fetch recent orders and update state.

        Returns:
            False when the fetch failed and the tick was skipped.
        """
        try:
            orders = await self._client.list_orders(limit=self.FETCH_LIMIT)
        except (httpx.HTTPError, OrderAPIError) as e:
            logger.warning("Order poll failed, skipping tick: %s", e)
            return False

        self.apply(orders)
        return True

    def apply(self, orders: Iterable[OrderSchema]) -> list[OrderSchema]:
        """
        Update state from one poll's orders.

        Returns:
            The truly new pending orders (already announced).
        """
        pending = [o for o in orders if o.status == OrderStatus.PENDING]
        pending_ids = [o.id for o in pending]
        unseen = [o for o in pending if o.id not in self.seen_ids]

        truly_new: list[OrderSchema] = []
        if self.first_poll:
            self.seen_ids.update(pending_ids)
            self.new_orders_count = 0
            self.first_poll = False
        else:
            previous = set(self.previous_pending_ids)
            truly_new = [o for o in unseen if o.id not in previous]
            self.new_orders_count = len(unseen)

        if truly_new:
            self._announce(truly_new)

        self.previous_pending_ids = pending_ids
        self.pending_order_count = len(pending)

        logger.debug(
            "Poll: %d pending, %d unseen, %d new",
            self.pending_order_count,
            self.new_orders_count,
            len(truly_new),
        )
        return truly_new

    def mark_orders_seen(self) -> None:
        """Acknowledge every order that was pending on the last poll."""
        self.seen_ids.update(self.previous_pending_ids)
        self.new_orders_count = 0

    def _announce(self, orders: list[OrderSchema]) -> None:
        count = len(orders)
        noun = "order" if count == 1 else "orders"
        logger.info(
            "%d new %s: %s", count, noun, ", ".join(o.order_number for o in orders)
        )
        self._notifier.chime(CHIME_TONES)
        self._notifier.toast("New orders", f"{count} new {noun} waiting")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def run(self) -> None:
        """Poll forever: immediately, then every ``interval`` seconds."""
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start polling in a background task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Cancel the polling task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __aenter__(self) -> "AdminNotificationPoller":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
