"""Shared fixtures for client tests."""

import uuid
from typing import Any

import pytest
from karahi_schemas import OrderSchema

from karahi_client.alerts import CHIME_TONES, Tone

API = "http://api.test"


class RecordingNotifier:
    """Notifier that remembers every alert instead of making noise."""

    def __init__(self) -> None:
        self.chimes: list[tuple[Tone, ...]] = []
        self.toasts: list[tuple[str, str]] = []
        self.celebrations: list[OrderSchema] = []

    def chime(self, tones: tuple[Tone, ...] = CHIME_TONES) -> None:
        self.chimes.append(tones)

    def toast(self, title: str, message: str) -> None:
        self.toasts.append((title, message))

    def celebrate(self, order: OrderSchema) -> None:
        self.celebrations.append(order)


def order_payload(status: str = "pending", **overrides: Any) -> dict[str, Any]:
    """An order as the API returns it (camelCase JSON)."""
    order_id = str(overrides.pop("id", uuid.uuid4()))
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


def make_order(status: str = "pending", **overrides: Any) -> OrderSchema:
    """A parsed OrderSchema."""
    return OrderSchema.model_validate(order_payload(status, **overrides))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
