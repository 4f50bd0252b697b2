"""Tests for OrderTrackingPoller and TrackingSession."""

import asyncio

import httpx
import pytest
import respx

from karahi_client.api import OrderAPIClient
from karahi_client.tracking import (
    OrderTrackingPoller,
    TrackingSession,
    active_order,
    parse_minutes,
)

from .conftest import API, make_order, order_payload


def _tracker(order_id, notifier, session=None, **kwargs) -> OrderTrackingPoller:
    return OrderTrackingPoller(
        OrderAPIClient(API, "guest-uid"), order_id, session, notifier, **kwargs
    )


class TestParseMinutes:
    """Tests for preparation time parsing."""

    @pytest.mark.parametrize(
        ("text", "minutes"),
        [("30", 30), (" 15 ", 15), ("20 min", 20), ("soon", None), ("", None)],
    )
    def test_parse(self, text, minutes) -> None:
        assert parse_minutes(text) == minutes


class TestCountdown:
    """Tests for the preparation countdown."""

    def test_seeded_once_from_first_preparing_poll(self, notifier) -> None:
        order = make_order("preparing", preparationTime="2")
        tracker = _tracker(order.id, notifier)

        tracker.apply(order)
        assert tracker.countdown_seconds == 120

        tracker.tick()
        tracker.tick()
        # A later poll never re-seeds, even with a different time
        tracker.apply(make_order("preparing", id=order.id, preparationTime="5"))

        assert tracker.countdown_seconds == 118
        assert tracker.countdown_display == "01:58"

    def test_not_seeded_while_pending(self, notifier) -> None:
        order = make_order()
        tracker = _tracker(order.id, notifier)

        tracker.apply(order)

        assert tracker.countdown_seconds is None
        assert tracker.tick() is None

    def test_floored_at_zero(self, notifier) -> None:
        order = make_order("preparing", preparationTime="0")
        tracker = _tracker(order.id, notifier)
        tracker.apply(order)

        tracker.tick()

        assert tracker.countdown_seconds == 0

    def test_unparseable_time_skips_countdown(self, notifier) -> None:
        order = make_order("preparing", preparationTime="a while")
        tracker = _tracker(order.id, notifier)

        tracker.apply(order)

        assert tracker.countdown_seconds is None


class TestCelebration:
    """Tests for the one-shot completion celebration."""

    def test_celebrates_once_per_order(self, notifier) -> None:
        order = make_order("completed")
        tracker = _tracker(order.id, notifier)

        tracker.apply(order)
        tracker.apply(order)

        assert notifier.celebrations == [order]
        assert len(notifier.toasts) == 1
        assert tracker.finished.is_set()

    def test_session_shared_between_trackers(self, notifier) -> None:
        """Remounting the tracker in the same session doesn't celebrate again."""
        session = TrackingSession()
        order = make_order("completed")

        _tracker(order.id, notifier, session).apply(order)
        _tracker(order.id, notifier, session).apply(order)

        assert len(notifier.celebrations) == 1
        assert order.id in session.celebrated_ids

    def test_new_session_celebrates_again(self, notifier) -> None:
        order = make_order("completed")

        _tracker(order.id, notifier, TrackingSession()).apply(order)
        _tracker(order.id, notifier, TrackingSession()).apply(order)

        assert len(notifier.celebrations) == 2

    def test_rejected_is_finished_without_celebration(self, notifier) -> None:
        order = make_order("rejected", rejectionReason="Closed early")
        tracker = _tracker(order.id, notifier)

        tracker.apply(order)

        assert tracker.finished.is_set()
        assert notifier.celebrations == []


class TestActiveOrder:
    """Tests for active_order()."""

    def test_most_recent_pending_or_preparing(self) -> None:
        newest_done = make_order("completed", createdAt="2026-10-19T20:00:00Z")
        active = make_order(
            "preparing", preparationTime="10", createdAt="2026-10-19T19:00:00Z"
        )
        older = make_order("pending", createdAt="2026-10-19T18:00:00Z")

        assert active_order([older, newest_done, active]) == active

    def test_none_active(self) -> None:
        assert active_order([make_order("cancelled", cancelledBy="guest")]) is None
        assert active_order([]) is None


class TestPolling:
    """Tests for fetching and lifecycle."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_poll_failure_keeps_state(self, notifier) -> None:
        payload = order_payload("preparing", preparationTime="10")
        respx.get(f"{API}/api/orders/{payload['id']}").mock(
            side_effect=[
                httpx.Response(200, json={"order": payload}),
                httpx.ConnectError("offline"),
            ]
        )
        tracker = _tracker(payload["id"], notifier)

        assert await tracker.poll_once() is True
        assert await tracker.poll_once() is False

        assert tracker.order.status == "preparing"
        assert tracker.countdown_seconds == 600

    @pytest.mark.asyncio
    @respx.mock
    async def test_html_body_skips_tick(self, notifier) -> None:
        payload = order_payload("preparing", preparationTime="10")
        respx.get(f"{API}/api/orders/{payload['id']}").mock(
            return_value=httpx.Response(200, text="<html>gateway</html>")
        )
        tracker = _tracker(payload["id"], notifier)

        assert await tracker.poll_once() is False
        assert tracker.order is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_finishes_after_bad_bodies(self, notifier) -> None:
        payload = order_payload("completed")
        bad = iter(
            [
                httpx.Response(200, json={"unexpected": True}),
                httpx.Response(200, text="<html>gateway</html>"),
            ]
        )

        def _next_response(request):
            return next(bad, httpx.Response(200, json={"order": payload}))

        route = respx.get(f"{API}/api/orders/{payload['id']}").mock(
            side_effect=_next_response
        )
        tracker = _tracker(
            payload["id"], notifier, poll_interval=0.01, tick_interval=0.01
        )

        async with tracker:
            await asyncio.wait_for(tracker.finished.wait(), timeout=2)

        assert route.call_count >= 3
        assert tracker.order.status == "completed"
        assert len(notifier.celebrations) == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_runs_until_completed(self, notifier) -> None:
        payload = order_payload("preparing", preparationTime="1")
        completed = {**payload, "status": "completed", "preparationTime": None}
        responses = iter([payload] * 5)

        def _next_state(request):
            return httpx.Response(200, json={"order": next(responses, completed)})

        respx.get(f"{API}/api/orders/{payload['id']}").mock(side_effect=_next_state)
        tracker = _tracker(
            payload["id"], notifier, poll_interval=0.01, tick_interval=0.01
        )

        async with tracker:
            await asyncio.wait_for(tracker.finished.wait(), timeout=2)

        assert not tracker.running
        assert tracker.order.status == "completed"
        assert tracker.countdown_seconds is not None
        assert tracker.countdown_seconds < 60
        assert len(notifier.celebrations) == 1
