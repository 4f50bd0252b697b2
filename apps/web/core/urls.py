"""
URL routing for auth API endpoints.
"""

from django.urls import path

from apps.web.core import views

app_name = "core"

urlpatterns = [
    path("sync", views.sync, name="sync"),
    path("user/<str:firebase_uid>", views.user_detail, name="user_detail"),
]
