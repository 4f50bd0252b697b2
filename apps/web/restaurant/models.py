"""
Restaurant models - Menu items and orders.

Orders snapshot the cart at checkout. Status and its side fields
(preparation_time, rejection_reason, cancelled_by) are only written by
apps.web.restaurant.services.order_lifecycle.
"""

import uuid

from django.db import models
from django.db.models import Q

from .managers import OrderQuerySet


class MenuItem(models.Model):
    """
    Individual dish on the menu.

    Plain admin-owned CRUD entity; images are hosted elsewhere and stored
    as URLs.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    calories = models.PositiveIntegerField()
    protein = models.PositiveIntegerField(help_text="Grams of protein")
    image = models.URLField(max_length=500)
    category = models.CharField(max_length=100)
    spicy = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Spice level label (e.g., Mild, Hot)",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category"], name="menuitem_category_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    PENDING = "pending", "Pending"
    PREPARING = "preparing", "Preparing"
    COMPLETED = "completed", "Completed"
    REJECTED = "rejected", "Rejected"
    CANCELLED = "cancelled", "Cancelled"


class CancelledBy(models.TextChoices):
    """Who cancelled an order."""

    GUEST = "guest", "Guest"
    # Never written; kept so rows cancelled by staff stay readable
    ADMIN = "admin", "Admin"


class Order(models.Model):
    """
    Customer order.

    Owner is a weak reference by Firebase UID (no foreign key, no cascade).
    Orders are never deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Owner (snapshot at checkout)
    firebase_uid = models.CharField(max_length=128)
    user_email = models.EmailField()
    user_name = models.CharField(max_length=200, null=True, blank=True)

    # Cart snapshot: [{name, price, quantity, image?, calories?, protein?}]
    items = models.JSONField()

    # Pricing
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    tax = models.DecimalField(max_digits=10, decimal_places=2)
    total = models.DecimalField(max_digits=10, decimal_places=2)

    # Lifecycle
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    preparation_time = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Estimated minutes; set only while preparing",
    )
    rejection_reason = models.TextField(
        null=True,
        blank=True,
        help_text="Set only when rejected",
    )
    cancelled_by = models.CharField(
        max_length=20,
        choices=CancelledBy.choices,
        null=True,
        blank=True,
        help_text="Set only when cancelled",
    )
    guest_arrived = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["firebase_uid", "created_at"], name="order_owner_created_idx"
            ),
            models.Index(
                fields=["status", "created_at"], name="order_status_created_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(
                        status__in=["pending", "completed"],
                        preparation_time__isnull=True,
                        rejection_reason__isnull=True,
                        cancelled_by__isnull=True,
                    )
                    | Q(
                        status="preparing",
                        rejection_reason__isnull=True,
                        cancelled_by__isnull=True,
                    )
                    | Q(
                        status="rejected",
                        preparation_time__isnull=True,
                        cancelled_by__isnull=True,
                    )
                    | Q(
                        status="cancelled",
                        preparation_time__isnull=True,
                        rejection_reason__isnull=True,
                    )
                ),
                name="order_side_fields_match_status",
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.order_number} - {self.user_email}"

    @property
    def order_number(self) -> str:
        """Customer-facing order number, e.g. #1A2B3C4D."""
        return f"#{self.id.hex[:8].upper()}"
