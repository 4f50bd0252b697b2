"""
Tests for the watch_orders and track_order management commands.

The commands talk to the API over HTTP, so responses are mocked with respx.
"""

import uuid
from io import StringIO

from django.core.management import CommandError, call_command

import httpx
import pytest
import respx

API = "http://api.test"


def _user_payload(uid: str, role: str = "admin") -> dict:
    return {
        "user": {
            "id": 1,
            "firebaseUid": uid,
            "email": f"{uid}@example.com",
            "displayName": None,
            "photoURL": None,
            "role": role,
        }
    }


def _order_payload(status: str = "pending", **overrides) -> dict:
    order_id = overrides.pop("id", str(uuid.uuid4()))
    order = {
        "id": order_id,
        "orderNumber": f"#{order_id.replace('-', '')[:8].upper()}",
        "firebaseUid": "guest-uid",
        "userEmail": "guest@example.com",
        "userName": "Guest User",
        "items": [{"name": "Chicken Karahi", "price": "24.99", "quantity": 1}],
        "subtotal": "24.99",
        "tax": "2.00",
        "total": "26.99",
        "status": status,
        "preparationTime": None,
        "rejectionReason": None,
        "cancelledBy": None,
        "guestArrived": False,
        "createdAt": "2026-10-19T18:00:00Z",
        "updatedAt": "2026-10-19T18:00:00Z",
    }
    order.update(overrides)
    return order


class TestWatchOrders:
    """Tests for the watch_orders command."""

    @respx.mock
    def test_once_reports_pending_count(self) -> None:
        respx.get(f"{API}/api/auth/user/admin-uid").mock(
            return_value=httpx.Response(200, json=_user_payload("admin-uid"))
        )
        orders_route = respx.get(f"{API}/api/orders").mock(
            return_value=httpx.Response(
                200,
                json={
                    "orders": [
                        _order_payload(),
                        _order_payload(),
                        _order_payload("preparing", preparationTime="10"),
                    ]
                },
            )
        )
        out = StringIO()

        call_command(
            "watch_orders",
            "--once",
            "--uid",
            "admin-uid",
            "--base-url",
            API,
            stdout=out,
        )

        assert "Pending orders: 2 (unseen: 0)" in out.getvalue()
        request = orders_route.calls.last.request
        assert request.url.params["limit"] == "100"
        assert request.headers["X-Firebase-UID"] == "admin-uid"

    @respx.mock
    def test_refuses_non_admin(self) -> None:
        respx.get(f"{API}/api/auth/user/guest-uid").mock(
            return_value=httpx.Response(200, json=_user_payload("guest-uid", "user"))
        )

        with pytest.raises(CommandError, match="not an admin"):
            call_command(
                "watch_orders", "--once", "--uid", "guest-uid", "--base-url", API
            )

    @respx.mock
    def test_unknown_user(self) -> None:
        respx.get(f"{API}/api/auth/user/nobody").mock(
            return_value=httpx.Response(
                401, json={"error": "authentication_required", "message": "Sign in"}
            )
        )

        with pytest.raises(CommandError, match="Could not load user"):
            call_command("watch_orders", "--once", "--uid", "nobody", "--base-url", API)

    def test_requires_uid(self, monkeypatch) -> None:
        monkeypatch.delenv("KARAHI_FIREBASE_UID", raising=False)

        with pytest.raises(CommandError, match="Firebase UID is required"):
            call_command("watch_orders", "--once", "--uid", "")


class TestTrackOrder:
    """Tests for the track_order command."""

    @respx.mock
    def test_once_with_order_id(self) -> None:
        order = _order_payload("preparing", preparationTime="15")
        respx.get(f"{API}/api/orders/{order['id']}").mock(
            return_value=httpx.Response(200, json={"order": order})
        )
        out = StringIO()

        call_command(
            "track_order",
            order["id"],
            "--once",
            "--uid",
            "guest-uid",
            "--base-url",
            API,
            stdout=out,
        )

        assert f"Order {order['orderNumber']}: preparing, about 15 min left" in (
            out.getvalue()
        )

    @respx.mock
    def test_picks_most_recent_active_order(self) -> None:
        done = _order_payload("completed", createdAt="2026-10-19T19:00:00Z")
        active = _order_payload("pending", createdAt="2026-10-19T18:30:00Z")
        older = _order_payload("pending", createdAt="2026-10-19T17:00:00Z")
        respx.get(f"{API}/api/orders/user/guest-uid").mock(
            return_value=httpx.Response(200, json={"orders": [done, active, older]})
        )
        detail = respx.get(f"{API}/api/orders/{active['id']}").mock(
            return_value=httpx.Response(200, json={"order": active})
        )
        out = StringIO()

        call_command(
            "track_order", "--once", "--uid", "guest-uid", "--base-url", API, stdout=out
        )

        assert detail.called
        assert f"Order {active['orderNumber']}: pending" in out.getvalue()

    @respx.mock
    def test_no_active_orders(self) -> None:
        respx.get(f"{API}/api/orders/user/guest-uid").mock(
            return_value=httpx.Response(
                200, json={"orders": [_order_payload("completed")]}
            )
        )
        out = StringIO()

        call_command(
            "track_order", "--once", "--uid", "guest-uid", "--base-url", API, stdout=out
        )

        assert "No active orders." in out.getvalue()

    @respx.mock
    def test_follows_order_until_completed(self) -> None:
        """Polls until terminal, celebrating the completion once."""
        order = _order_payload("preparing", preparationTime="1")
        completed = {**order, "status": "completed", "preparationTime": None}
        responses = iter([order])

        def _next_state(request):
            return httpx.Response(200, json={"order": next(responses, completed)})

        respx.get(f"{API}/api/orders/{order['id']}").mock(side_effect=_next_state)
        out = StringIO()

        call_command(
            "track_order",
            order["id"],
            "--uid",
            "guest-uid",
            "--base-url",
            API,
            "--poll-interval",
            "0.01",
            stdout=out,
        )

        output = out.getvalue()
        assert f"Order {order['orderNumber']}: completed" in output
        assert output.count("is ready for pickup!") == 1

    @respx.mock
    def test_order_not_found(self) -> None:
        order_id = str(uuid.uuid4())
        respx.get(f"{API}/api/orders/{order_id}").mock(
            return_value=httpx.Response(
                404, json={"error": "not_found", "message": "Order not found"}
            )
        )

        with pytest.raises(CommandError, match="Could not load order"):
            call_command(
                "track_order",
                order_id,
                "--once",
                "--uid",
                "guest-uid",
                "--base-url",
                API,
            )
