"""Tests for restaurant models and querysets."""

from datetime import timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

import pytest

from apps.web.restaurant.models import MenuItem, Order, OrderStatus

from .factories import MenuItemFactory, OrderFactory


@pytest.mark.django_db
class TestMenuItem:
    """Tests for MenuItem model."""

    def test_create_menu_item(self) -> None:
        item = MenuItemFactory(name="Lamb Karahi")

        assert item.pk is not None
        assert str(item) == "Lamb Karahi"
        assert item.spicy is None

    def test_newest_first(self) -> None:
        older = MenuItemFactory()
        newer = MenuItemFactory()
        MenuItem.objects.filter(pk=older.pk).update(
            created_at=timezone.now() - timedelta(hours=1)
        )

        assert list(MenuItem.objects.all()) == [newer, older]


@pytest.mark.django_db
class TestOrder:
    """Tests for Order model."""

    def test_defaults(self) -> None:
        order = OrderFactory()

        assert order.status == OrderStatus.PENDING
        assert order.preparation_time is None
        assert order.rejection_reason is None
        assert order.cancelled_by is None
        assert order.guest_arrived is False

    def test_order_number(self) -> None:
        order = OrderFactory()

        assert order.order_number == f"#{order.id.hex[:8].upper()}"
        assert order.order_number in str(order)

    @pytest.mark.parametrize(
        "fields",
        [
            {"status": "pending", "preparation_time": "10"},
            {"status": "completed", "rejection_reason": "Closed"},
            {"status": "preparing", "preparation_time": "10", "cancelled_by": "guest"},
            {"status": "rejected", "rejection_reason": "x", "preparation_time": "5"},
            {"status": "cancelled", "cancelled_by": "guest", "rejection_reason": "x"},
        ],
    )
    def test_side_field_constraint(self, fields) -> None:
        """The database refuses side fields that don't match the status."""
        order = OrderFactory()

        with pytest.raises(IntegrityError), transaction.atomic():
            Order.objects.filter(pk=order.pk).update(**fields)


@pytest.mark.django_db
class TestOrderQuerySet:
    """Tests for OrderQuerySet."""

    def test_for_user(self) -> None:
        mine = OrderFactory(firebase_uid="me")
        OrderFactory(firebase_uid="someone-else")

        assert list(Order.objects.for_user("me")) == [mine]

    def test_pending(self) -> None:
        pending = OrderFactory()
        OrderFactory(preparing=True)
        OrderFactory(completed=True)

        assert list(Order.objects.pending()) == [pending]

    def test_recent_is_newest_first_and_limited(self) -> None:
        orders = [OrderFactory() for _ in range(3)]
        now = timezone.now()
        for age, order in enumerate(orders):
            Order.objects.filter(pk=order.pk).update(
                created_at=now - timedelta(minutes=age)
            )

        recent = list(Order.objects.recent(2))

        assert recent == orders[:2]

    def test_recent_rejects_non_positive_limit(self) -> None:
        with pytest.raises(ValueError, match="limit must be positive"):
            Order.objects.recent(0)
