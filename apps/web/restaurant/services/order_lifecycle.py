"""
Order lifecycle service - the only code path that writes order status.

State machine:

    pending ──► preparing ──► completed
       │
       ├──► rejected
       └──► cancelled

completed, rejected and cancelled are terminal. Each status owns at most one
side field (preparation_time, rejection_reason, cancelled_by); entering a
status sets its own field and clears the other two.

Writes are a single-row compare-and-swap on the status the caller read, so
two concurrent transitions on the same order can't both apply.
"""

import logging
from typing import Any

from django.db import transaction
from django.utils import timezone

from karahi_schemas import OrderCreateRequest

from apps.web.core.exceptions import (
    InvalidTransitionError,
    TransitionConflictError,
    ValidationError,
)
from apps.web.core.models import User
from apps.web.restaurant.models import CancelledBy, Order, OrderStatus

logger = logging.getLogger(__name__)

# Allowed edges of the status graph
TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING.value: frozenset(
        {
            OrderStatus.PREPARING.value,
            OrderStatus.REJECTED.value,
            OrderStatus.CANCELLED.value,
        }
    ),
    OrderStatus.PREPARING.value: frozenset({OrderStatus.COMPLETED.value}),
    OrderStatus.COMPLETED.value: frozenset(),
    OrderStatus.REJECTED.value: frozenset(),
    OrderStatus.CANCELLED.value: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


def _value(status: Any) -> str:
    """Plain string value of a status, whichever enum it came from."""
    return str(getattr(status, "value", status))


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_transition(current: str, target: str) -> None:
    """Raise InvalidTransitionError unless current -> target is an edge."""
    if target == OrderStatus.CANCELLED and current != OrderStatus.PENDING:
        raise InvalidTransitionError(
            f"Only pending orders can be cancelled (order is {current})"
        )
    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            f"Order is already {current}; no further status changes are allowed"
        )
    if target not in TRANSITIONS[current]:
        raise InvalidTransitionError(f"Cannot change order from {current} to {target}")


def _side_fields(
    target: str,
    preparation_time: str | None,
    rejection_reason: str | None,
) -> dict[str, Any]:
    """
    Build the side-field values for entering ``target``.

    Raises:
        ValidationError: If the field the target status requires is missing.
    """
    fields: dict[str, Any] = {
        "preparation_time": None,
        "rejection_reason": None,
        "cancelled_by": None,
    }

    if target == OrderStatus.PREPARING:
        preparation_time = _clean_text(preparation_time)
        if preparation_time is None:
            raise ValidationError(
                "Preparation time is required to start preparing an order",
                details=[
                    {"field": "preparationTime", "message": "This field is required"}
                ],
            )
        fields["preparation_time"] = preparation_time

    elif target == OrderStatus.REJECTED:
        rejection_reason = _clean_text(rejection_reason)
        if rejection_reason is None:
            raise ValidationError(
                "A rejection reason is required to reject an order",
                details=[
                    {"field": "rejectionReason", "message": "This field is required"}
                ],
            )
        fields["rejection_reason"] = rejection_reason

    elif target == OrderStatus.CANCELLED:
        # Only guests cancel; admins reject instead
        fields["cancelled_by"] = CancelledBy.GUEST

    elif target == OrderStatus.COMPLETED:
        # The guest has been served
        fields["guest_arrived"] = False

    return fields


def transition(
    order: Order,
    target_status: str,
    *,
    preparation_time: str | None = None,
    rejection_reason: str | None = None,
) -> Order:
    """
    Move an order to a new status.

    Authorization is the caller's job (see the Order API views); this
    function only enforces the state machine.

    Args:
        order: The order as the caller last read it.
        target_status: One of OrderStatus.values.
        preparation_time: Required when target is preparing.
        rejection_reason: Required when target is rejected.

    Returns:
        The same Order instance, updated in place.

    Raises:
        ValidationError: Unknown target status or missing required field.
        InvalidTransitionError: The edge is not in the status graph.
        TransitionConflictError: The order's status changed since it was read.
    """
    target_status = _value(target_status)
    if target_status not in OrderStatus.values:
        raise ValidationError(
            f"Invalid status: {target_status}. "
            f"Must be one of: {', '.join(OrderStatus.values)}"
        )

    current = _value(order.status)
    _check_transition(current, target_status)
    fields = _side_fields(target_status, preparation_time, rejection_reason)
    fields["status"] = target_status
    fields["updated_at"] = timezone.now()

    with transaction.atomic():
        updated = Order.objects.filter(pk=order.pk, status=current).update(**fields)

    if not updated:
        order.refresh_from_db()
        logger.warning(
            "Order %s: %s -> %s lost a race (now %s)",
            order.pk,
            current,
            target_status,
            order.status,
        )
        raise TransitionConflictError(
            f"Order changed to {order.status} before this update could apply"
        )

    for name, value in fields.items():
        setattr(order, name, value)

    logger.info("Order %s: %s -> %s", order.pk, current, target_status)
    return order


def cancel_order(order: Order) -> Order:
    """Cancel a pending order on behalf of its guest."""
    return transition(order, OrderStatus.CANCELLED)


def set_guest_arrived(order: Order) -> Order:
    """
    Flag that the guest has arrived to pick up the order.

    Idempotent and independent of status.
    """
    if order.guest_arrived:
        return order

    now = timezone.now()
    Order.objects.filter(pk=order.pk).update(guest_arrived=True, updated_at=now)
    order.guest_arrived = True
    order.updated_at = now

    logger.info("Order %s: guest arrived", order.pk)
    return order


def place_order(owner: User, request: OrderCreateRequest) -> Order:
    """
    Create a pending order from a validated cart snapshot.

    Owner email and name are copied from the User record at this moment.

    Raises:
        ValidationError: The owner has no email address on record (e.g. a
            staff account created without one).
    """
    if not owner.email:
        logger.warning("Order refused for %s: no email on record", owner.firebase_uid)
        raise ValidationError(
            "Your account has no email address; sign in again to sync it",
            details=[{"field": "email", "message": "This field is required"}],
        )

    order = Order.objects.create(
        firebase_uid=owner.firebase_uid,
        user_email=owner.email,
        user_name=owner.display_name,
        items=[
            item.model_dump(mode="json", exclude_none=True) for item in request.items
        ],
        subtotal=request.subtotal,
        tax=request.tax,
        total=request.total,
        status=OrderStatus.PENDING,
    )

    logger.info(
        "Order %s placed by %s: %d item(s), total %s",
        order.pk,
        owner.firebase_uid,
        len(request.items),
        order.total,
    )
    return order
