"""
Model-to-schema serialization for the restaurant API.

The wire contracts themselves live in karahi_schemas so the Python client
parses exactly what these functions produce.
"""

from karahi_schemas import MenuItemSchema, OrderItem, OrderSchema

from apps.web.restaurant.models import MenuItem, Order


def serialize_order(order: Order) -> OrderSchema:
    """Serialize an Order model to schema."""
    return OrderSchema(
        id=order.pk,
        order_number=order.order_number,
        firebase_uid=order.firebase_uid,
        user_email=order.user_email,
        user_name=order.user_name,
        items=[OrderItem.model_validate(item) for item in order.items],
        subtotal=order.subtotal,
        tax=order.tax,
        total=order.total,
        status=order.status,
        preparation_time=order.preparation_time,
        rejection_reason=order.rejection_reason,
        cancelled_by=order.cancelled_by,
        guest_arrived=order.guest_arrived,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def serialize_menu_item(item: MenuItem) -> MenuItemSchema:
    """Serialize a MenuItem model to schema."""
    return MenuItemSchema(
        id=item.pk,
        name=item.name,
        description=item.description,
        price=item.price,
        calories=item.calories,
        protein=item.protein,
        image=item.image,
        category=item.category,
        spicy=item.spicy,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )
