"""
Order tracking poller - the customer's live view of one order.

Polls the order every few seconds while running and derives two things the
order confirmation screen shows:

- A preparation countdown, seeded once from the first preparationTime seen
  while the order is preparing and then ticked down locally each second.
  Later polls never re-seed it, so repeated fetches can't make it jump.
- A one-shot celebration when the order completes, at most once per order
  per TrackingSession.
"""

import asyncio
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

import httpx
from karahi_schemas import ACTIVE_STATUSES, OrderSchema, OrderStatus

from karahi_client.alerts import Notifier, TerminalNotifier
from karahi_client.api import OrderAPIClient, OrderAPIError

logger = logging.getLogger(__name__)

_LEADING_MINUTES = re.compile(r"^\s*(\d+)")


@dataclass
class TrackingSession:
    """Per-session state shared by every tracking poller of one customer."""

    celebrated_ids: set[UUID] = field(default_factory=set)

    def claim_celebration(self, order_id: UUID) -> bool:
        """Return True the first time an order id is claimed, False after."""
        if order_id in self.celebrated_ids:
            return False
        self.celebrated_ids.add(order_id)
        return True


def parse_minutes(preparation_time: str | None) -> int | None:
    """Leading whole minutes of a free-text preparation time ("15", "20 min")."""
    if not preparation_time:
        return None
    match = _LEADING_MINUTES.match(preparation_time)
    return int(match.group(1)) if match else None


def active_order(orders: Iterable[OrderSchema]) -> OrderSchema | None:
    """The most recent order that is still pending or preparing, if any."""
    active = [o for o in orders if o.status in ACTIVE_STATUSES]
    if not active:
        return None
    return max(active, key=lambda o: o.created_at)


class OrderTrackingPoller:
    """
    Follow a single order until it is done.

    Usage:
        session = TrackingSession()
        async with OrderTrackingPoller(client, order_id, session) as tracker:
            await tracker.finished.wait()
    """

    POLL_INTERVAL = 3.0
    TICK_INTERVAL = 1.0

    def __init__(
        self,
        client: OrderAPIClient,
        order_id: UUID | str,
        session: TrackingSession | None = None,
        notifier: Notifier | None = None,
        *,
        poll_interval: float = POLL_INTERVAL,
        tick_interval: float = TICK_INTERVAL,
    ) -> None:
        self._client = client
        self.order_id = UUID(str(order_id))
        self.session = session or TrackingSession()
        self._notifier = notifier or TerminalNotifier()
        self.poll_interval = poll_interval
        self.tick_interval = tick_interval

        self.order: OrderSchema | None = None
        self.countdown_seconds: int | None = None
        self._countdown_seeded = False
        self.finished = asyncio.Event()

        self._tasks: list[asyncio.Task[None]] = []

    # =========================================================================
    # Polling
    # =========================================================================

    async def poll_once(self) -> bool:
        """
        Fetch the order and update state.

        Returns:
            False when the fetch failed and the tick was skipped.
        """
        try:
            order = await self._client.get_order(self.order_id)
        except (httpx.HTTPError, OrderAPIError) as e:
            logger.warning("Tracking poll for %s failed: %s", self.order_id, e)
            return False

        self.apply(order)
        return True

    def apply(self, order: OrderSchema) -> None:
        """Update countdown, celebration and finished state from one poll."""
        previous = self.order.status if self.order else None
        self.order = order
        if previous != order.status:
            logger.info("Order %s is %s", order.order_number, order.status.value)

        if (
            not self._countdown_seeded
            and order.status == OrderStatus.PREPARING
            and order.preparation_time is not None
        ):
            self._seed_countdown(order.preparation_time)

        if order.status == OrderStatus.COMPLETED and self.session.claim_celebration(
            order.id
        ):
            self._notifier.celebrate(order)
            self._notifier.toast(
                "Order ready", f"Order {order.order_number} is ready for pickup"
            )

        if order.is_terminal:
            self.finished.set()

    def _seed_countdown(self, preparation_time: str) -> None:
        self._countdown_seeded = True
        minutes = parse_minutes(preparation_time)
        if minutes is None:
            logger.warning(
                "Order %s: no countdown for preparation time %r",
                self.order_id,
                preparation_time,
            )
            return
        self.countdown_seconds = minutes * 60

    def tick(self) -> int | None:
        """Advance the countdown by one second (never below zero)."""
        if self.countdown_seconds is not None and self.countdown_seconds > 0:
            self.countdown_seconds -= 1
        return self.countdown_seconds

    @property
    def countdown_display(self) -> str | None:
        """Countdown as MM:SS, or None when there is none."""
        if self.countdown_seconds is None:
            return None
        minutes, seconds = divmod(self.countdown_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def _poll_loop(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self.poll_interval)

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.tick()

    def start(self) -> None:
        """Start the poll and countdown tasks."""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._poll_loop()),
            asyncio.create_task(self._tick_loop()),
        ]

    async def stop(self) -> None:
        """Cancel both tasks and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def __aenter__(self) -> "OrderTrackingPoller":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
