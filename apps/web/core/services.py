"""
Identity services - user sync from Firebase sign-in.
"""

import logging

from django.conf import settings
from django.db import transaction

from karahi_schemas import UserRole, UserSyncRequest

from apps.web.core.models import User

logger = logging.getLogger(__name__)


def is_admin_email(email: str) -> bool:
    """Check an email against the ADMIN_EMAILS allow-list (case-insensitive)."""
    allowed = {e.strip().lower() for e in getattr(settings, "ADMIN_EMAILS", [])}
    return email.strip().lower() in allowed


def resolve_role(email: str, requested: UserRole | None) -> str:
    """
    Decide the role for a synced user.

    Admin is granted by allow-list membership alone. A requested role is
    advisory: asking for admin without being allow-listed is logged and
    downgraded to user.
    """
    if is_admin_email(email):
        return User.Role.ADMIN

    if requested == UserRole.ADMIN:
        logger.warning("Denied admin role for %s: not on the allow-list", email)
    return User.Role.USER


@transaction.atomic
def sync_user(request: UserSyncRequest) -> tuple[User, bool]:
    """
    Create or update the User for a Firebase sign-in.

    Args:
        request: Validated sync payload from the client.

    Returns:
        Tuple of (user, created).
    """
    role = resolve_role(request.email, request.role)

    user, created = User.objects.select_for_update().update_or_create(
        firebase_uid=request.firebase_uid,
        defaults={
            "username": request.firebase_uid,
            "email": request.email,
            "display_name": request.display_name,
            "photo_url": request.photo_url,
            "role": role,
        },
    )
    if created:
        user.set_unusable_password()
        user.save(update_fields=["password"])
        logger.info("Created user %s (%s) as %s", user.firebase_uid, user.email, role)
    else:
        logger.info("Synced user %s (%s) as %s", user.firebase_uid, user.email, role)

    return user, created
