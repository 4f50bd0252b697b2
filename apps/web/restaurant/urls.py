"""
URL routing for restaurant API endpoints.

Menu reads are public; everything else needs an X-Firebase-UID caller.
"""

from django.urls import path

from apps.web.restaurant import views

app_name = "restaurant"

urlpatterns = [
    # Order endpoints
    path("orders", views.orders, name="orders"),
    path("orders/user/<str:firebase_uid>", views.user_orders, name="user_orders"),
    path("orders/<uuid:order_id>", views.order_detail, name="order_detail"),
    path("orders/<uuid:order_id>/status", views.order_status, name="order_status"),
    path("orders/<uuid:order_id>/arrived", views.order_arrived, name="order_arrived"),
    path("orders/<uuid:order_id>/cancel", views.order_cancel, name="order_cancel"),
    # Menu endpoints
    path("menu", views.menu, name="menu"),
    path("menu/<uuid:item_id>", views.menu_item, name="menu_item"),
]
