"""
Core models - Identity.

Users are created and kept in sync from Firebase sign-in; the Firebase UID
is the identity every API request carries.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model keyed by Firebase UID.

    ``username`` mirrors ``firebase_uid`` so the Django admin site keeps working.
    ``role`` is only ever elevated to admin by the server-side allow-list.
    """

    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    firebase_uid = models.CharField(
        max_length=128,
        unique=True,
        help_text="Firebase Authentication UID",
    )
    display_name = models.CharField(max_length=200, null=True, blank=True)
    photo_url = models.URLField(max_length=500, null=True, blank=True)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
    )

    class Meta:
        ordering = ["email"]

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN
