"""
Custom querysets for orders.

Read paths used by the Order API; writes go through the lifecycle service.
"""

from typing import TYPE_CHECKING, TypeVar

from django.db import models

if TYPE_CHECKING:
    from .models import Order

_T = TypeVar("_T", bound="Order")


class OrderQuerySet(models.QuerySet[_T]):
    """
    QuerySet with the order list views the API exposes.

    Usage in views:
        orders = Order.objects.for_user(uid).newest_first()

    SECURITY: filtering by owner is not authorization; views still check
    that the caller is the owner or an admin.
    """

    def for_user(self, firebase_uid: str) -> "OrderQuerySet[_T]":
        """Orders owned by a Firebase UID."""
        return self.filter(firebase_uid=firebase_uid)

    def pending(self) -> "OrderQuerySet[_T]":
        """Orders waiting for the kitchen to accept or reject them."""
        return self.filter(status="pending")

    def newest_first(self) -> "OrderQuerySet[_T]":
        return self.order_by("-created_at")

    def recent(self, limit: int) -> "OrderQuerySet[_T]":
        """
        The most recent orders, newest first.

        Args:
            limit: Maximum number of orders (must be positive).
        """
        if limit < 1:
            msg = f"limit must be positive, got {limit}"
            raise ValueError(msg)
        return self.newest_first()[:limit]
