"""Restaurant services - order lifecycle."""

from apps.web.restaurant.services.order_lifecycle import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    cancel_order,
    place_order,
    set_guest_arrived,
    transition,
)

__all__ = [
    "TERMINAL_STATUSES",
    "TRANSITIONS",
    "cancel_order",
    "place_order",
    "set_guest_arrived",
    "transition",
]
