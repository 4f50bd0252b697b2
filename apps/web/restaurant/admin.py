"""Admin registration for restaurant models."""

from django.contrib import admin

from apps.web.restaurant.models import MenuItem, Order


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """Admin for menu items."""

    list_display = ["name", "category", "price", "spicy", "created_at"]
    list_filter = ["category", "spicy"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["id", "name", "description", "category", "price"]}),
        ("Media", {"fields": ["image"]}),
        ("Nutrition", {"fields": ["calories", "protein", "spicy"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin for orders.

    Status and its side fields are read-only here; transitions go through
    the Order API so the state machine stays the only writer. The customer
    and cart fields are a checkout snapshot and are read-only too.
    """

    list_display = [
        "order_number",
        "user_email",
        "status",
        "total",
        "guest_arrived",
        "created_at",
    ]
    list_filter = ["status", "guest_arrived"]
    search_fields = ["id", "firebase_uid", "user_email", "user_name"]
    readonly_fields = [
        "id",
        "order_number",
        "firebase_uid",
        "user_email",
        "user_name",
        "items",
        "subtotal",
        "tax",
        "total",
        "status",
        "preparation_time",
        "rejection_reason",
        "cancelled_by",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"

    fieldsets = [
        (None, {"fields": ["id", "order_number"]}),
        ("Customer", {"fields": ["firebase_uid", "user_email", "user_name"]}),
        ("Items", {"fields": ["items"]}),
        ("Pricing", {"fields": ["subtotal", "tax", "total"]}),
        (
            "Status",
            {
                "fields": [
                    "status",
                    "preparation_time",
                    "rejection_reason",
                    "cancelled_by",
                    "guest_arrived",
                ]
            },
        ),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]

    def has_delete_permission(self, request, obj=None):
        return False
