"""
Order and Menu API views.

These endpoints are used by the customer front-end and the admin dashboard:
- Customers: checkout, order history, status tracking, cancel, "I'm here"
- Admins: order queue polling, accept/reject/complete, menu management

Caller identity comes from the X-Firebase-UID header (see CallerMiddleware);
every check below uses the role stored on the User record.
"""

import logging
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from karahi_schemas import (
    MenuItemCreateRequest,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdateRequest,
    OrderCreateRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatus,
    OrderStatusUpdateRequest,
)

from apps.web.core.decorators import admin_required, caller_required, idempotent
from apps.web.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from apps.web.core.http import dump, json_response, parse_body
from apps.web.core.models import User
from apps.web.restaurant.models import MenuItem, Order
from apps.web.restaurant.serializers import serialize_menu_item, serialize_order
from apps.web.restaurant.services import (
    cancel_order,
    place_order,
    set_guest_arrived,
    transition,
)

logger = logging.getLogger(__name__)


def _get_order_or_404(order_id: UUID) -> Order:
    """Get an order by id or raise NotFoundError."""
    try:
        return Order.objects.get(pk=order_id)
    except Order.DoesNotExist as exc:
        raise NotFoundError(f"Order {order_id} not found") from exc


def _get_menu_item_or_404(item_id: UUID) -> MenuItem:
    """Get a menu item by id or raise NotFoundError."""
    try:
        return MenuItem.objects.get(pk=item_id)
    except MenuItem.DoesNotExist as exc:
        raise NotFoundError(f"Menu item {item_id} not found") from exc


def _is_owner(caller: User, order: Order) -> bool:
    return caller.firebase_uid == order.firebase_uid


def _order_response(order: Order, status: int = 200) -> JsonResponse:
    return json_response(dump(OrderResponse(order=serialize_order(order))), status)


def _parse_limit(request: HttpRequest) -> int:
    """Read ?limit=N, defaulting and capping from settings."""
    default = settings.ORDER_LIST_DEFAULT_LIMIT
    raw = request.GET.get("limit")
    if raw is None or raw == "":
        return default

    try:
        limit = int(raw)
    except ValueError as exc:
        raise ValidationError(
            "limit must be a positive integer",
            details=[{"field": "limit", "message": f"Invalid value: {raw!r}"}],
        ) from exc

    if limit < 1:
        raise ValidationError(
            "limit must be a positive integer",
            details=[{"field": "limit", "message": f"Invalid value: {raw!r}"}],
        )
    return min(limit, settings.ORDER_LIST_MAX_LIMIT)


# =============================================================================
# Order API Endpoints
# =============================================================================


@csrf_exempt
@require_http_methods(["GET", "POST"])
def orders(request: HttpRequest) -> JsonResponse:
    """
    GET  /api/orders?limit=N   (admin) recent orders, newest first
    POST /api/orders           (any signed-in user) place an order
    """
    if request.method == "POST":
        return create_order(request)
    return list_orders(request)


@idempotent
@caller_required
def create_order(request: HttpRequest) -> JsonResponse:
    """
    POST /api/orders

    Place an order owned by the caller, status pending.

    Request body: OrderCreateRequest schema
    Response: OrderResponse schema (201) or validation error (400)
    """
    caller: User = request.caller  # type: ignore[attr-defined]
    order_request = parse_body(request, OrderCreateRequest)

    # A response that can't be serialized must not leave an order behind
    with transaction.atomic():
        order = place_order(caller, order_request)
        return _order_response(order, status=201)


@never_cache
@admin_required
def list_orders(request: HttpRequest) -> JsonResponse:
    """
    GET /api/orders?limit=N

    Recent orders across all customers, newest first. Polled by the admin
    notification poller.
    """
    limit = _parse_limit(request)
    recent = Order.objects.recent(limit)

    response = OrderListResponse(orders=[serialize_order(o) for o in recent])
    return json_response(dump(response))


@never_cache
@require_http_methods(["GET"])
@caller_required
def user_orders(request: HttpRequest, firebase_uid: str) -> JsonResponse:
    """
    GET /api/orders/user/{firebase_uid}

    Orders placed by one user, newest first. The user themselves or an admin.
    """
    caller: User = request.caller  # type: ignore[attr-defined]
    if caller.firebase_uid != firebase_uid and not caller.is_admin:
        raise AuthorizationError("You can only view your own orders")

    owned = Order.objects.for_user(firebase_uid).newest_first()
    response = OrderListResponse(orders=[serialize_order(o) for o in owned])
    return json_response(dump(response))


@never_cache
@require_http_methods(["GET"])
@caller_required
def order_detail(request: HttpRequest, order_id: UUID) -> JsonResponse:
    """
    GET /api/orders/{order_id}

    Single order, for its owner or an admin. Polled by the order tracking
    poller every few seconds.
    """
    caller: User = request.caller  # type: ignore[attr-defined]
    order = _get_order_or_404(order_id)

    if not _is_owner(caller, order) and not caller.is_admin:
        raise AuthorizationError("You can only view your own orders")

    return _order_response(order)


@csrf_exempt
@require_http_methods(["PATCH"])
@caller_required
def order_status(request: HttpRequest, order_id: UUID) -> JsonResponse:
    """
    PATCH /api/orders/{order_id}/status

    Apply a status transition.
    - cancelled: the order's owner only (same rule as /cancel)
    - every other target: admin only

    Authorization is checked before the state machine runs; its errors
    reveal the current status.

    Request body: OrderStatusUpdateRequest schema
    Response: OrderResponse schema
    """
    caller: User = request.caller  # type: ignore[attr-defined]
    update = parse_body(request, OrderStatusUpdateRequest)
    order = _get_order_or_404(order_id)

    if update.status == OrderStatus.CANCELLED:
        if not _is_owner(caller, order):
            raise AuthorizationError("Only the guest who placed an order can cancel it")
        cancel_order(order)
        return _order_response(order)

    if not caller.is_admin:
        logger.warning(
            "Non-admin %s tried to set order %s to %s",
            caller.firebase_uid,
            order.pk,
            update.status.value,
        )
        raise AuthorizationError("Admin access required")

    transition(
        order,
        update.status.value,
        preparation_time=update.preparation_time,
        rejection_reason=update.rejection_reason,
    )
    return _order_response(order)


@csrf_exempt
@require_http_methods(["PATCH"])
@caller_required
def order_arrived(request: HttpRequest, order_id: UUID) -> JsonResponse:
    """
    PATCH /api/orders/{order_id}/arrived

    Owner signals they've arrived to collect the order. Idempotent.
    """
    caller: User = request.caller  # type: ignore[attr-defined]
    order = _get_order_or_404(order_id)

    if not _is_owner(caller, order):
        raise AuthorizationError("Only the guest who placed an order can check in")

    set_guest_arrived(order)
    return _order_response(order)


@csrf_exempt
@require_http_methods(["PATCH"])
@caller_required
def order_cancel(request: HttpRequest, order_id: UUID) -> JsonResponse:
    """
    PATCH /api/orders/{order_id}/cancel

    Owner cancels their own order while it is still pending.
    """
    caller: User = request.caller  # type: ignore[attr-defined]
    order = _get_order_or_404(order_id)

    if not _is_owner(caller, order):
        raise AuthorizationError("Only the guest who placed an order can cancel it")

    cancel_order(order)
    return _order_response(order)


# =============================================================================
# Menu API Endpoints
# =============================================================================


@csrf_exempt
@require_http_methods(["GET", "POST"])
def menu(request: HttpRequest) -> JsonResponse:
    """
    GET  /api/menu[?category=...]   (anyone) menu items, newest first
    POST /api/menu                  (admin) add a menu item
    """
    if request.method == "POST":
        return create_menu_item(request)

    items = MenuItem.objects.all()
    category = request.GET.get("category")
    if category:
        items = items.filter(category__iexact=category)

    response = MenuItemListResponse(items=[serialize_menu_item(i) for i in items])
    return json_response(dump(response))


@admin_required
def create_menu_item(request: HttpRequest) -> JsonResponse:
    """
    POST /api/menu

    Request body: MenuItemCreateRequest schema
    Response: MenuItemResponse schema (201)
    """
    create_request = parse_body(request, MenuItemCreateRequest)
    item = MenuItem.objects.create(**create_request.model_dump())

    logger.info("Menu item %s (%s) created", item.pk, item.name)
    return json_response(
        dump(MenuItemResponse(item=serialize_menu_item(item))), status=201
    )


@csrf_exempt
@require_http_methods(["GET", "PATCH", "DELETE"])
def menu_item(request: HttpRequest, item_id: UUID) -> HttpResponse:
    """
    GET    /api/menu/{item_id}   (anyone)
    PATCH  /api/menu/{item_id}   (admin) partial update
    DELETE /api/menu/{item_id}   (admin)
    """
    if request.method == "PATCH":
        return update_menu_item(request, item_id)
    if request.method == "DELETE":
        return delete_menu_item(request, item_id)

    item = _get_menu_item_or_404(item_id)
    return json_response(dump(MenuItemResponse(item=serialize_menu_item(item))))


@admin_required
def update_menu_item(request: HttpRequest, item_id: UUID) -> JsonResponse:
    """
    PATCH /api/menu/{item_id}

    Request body: MenuItemUpdateRequest schema (omitted fields unchanged)
    """
    update = parse_body(request, MenuItemUpdateRequest)
    item = _get_menu_item_or_404(item_id)

    changes = update.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(item, field, value)
    if changes:
        item.save(update_fields=[*changes, "updated_at"])
        logger.info("Menu item %s updated: %s", item.pk, ", ".join(changes))

    return json_response(dump(MenuItemResponse(item=serialize_menu_item(item))))


@admin_required
def delete_menu_item(request: HttpRequest, item_id: UUID) -> HttpResponse:
    """
    DELETE /api/menu/{item_id}

    Past orders keep their own item snapshots, so deletion is safe.
    """
    item = _get_menu_item_or_404(item_id)
    item.delete()

    logger.info("Menu item %s deleted", item_id)
    response = HttpResponse(status=204)
    return response
