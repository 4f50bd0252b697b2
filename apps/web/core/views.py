"""
Auth API views - user sync and lookup.

Firebase Authentication happens in the browser; after sign-in the front-end
syncs the user here and then sends its Firebase UID on every API request.
"""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from karahi_schemas import UserResponse, UserSchema, UserSyncRequest

from apps.web.core.decorators import caller_required
from apps.web.core.exceptions import AuthorizationError, NotFoundError
from apps.web.core.http import dump, json_response, parse_body
from apps.web.core.models import User
from apps.web.core.services import sync_user


def serialize_user(user: User) -> UserSchema:
    """Serialize a User model to schema."""
    return UserSchema(
        id=user.pk,
        firebase_uid=user.firebase_uid,
        email=user.email,
        display_name=user.display_name,
        photo_url=user.photo_url,
        role=user.role,
    )


@csrf_exempt
@require_POST
def sync(request: HttpRequest) -> JsonResponse:
    """
    POST /api/auth/sync

    Create or update a user from Firebase sign-in/sign-up.

    Request body: UserSyncRequest schema
    Response: UserResponse schema (201 when created, 200 when updated)
    """
    sync_request = parse_body(request, UserSyncRequest)
    user, created = sync_user(sync_request)

    response = UserResponse(user=serialize_user(user))
    return json_response(dump(response), status=201 if created else 200)


@require_GET
@caller_required
def user_detail(request: HttpRequest, firebase_uid: str) -> JsonResponse:
    """
    GET /api/auth/user/{firebase_uid}

    Get a user by Firebase UID. Callers may read themselves; admins anyone.
    """
    caller: User = request.caller  # type: ignore[attr-defined]
    if caller.firebase_uid != firebase_uid and not caller.is_admin:
        raise AuthorizationError("You can only view your own profile")

    try:
        user = User.objects.get(firebase_uid=firebase_uid)
    except User.DoesNotExist as exc:
        raise NotFoundError("User not found") from exc

    return json_response(dump(UserResponse(user=serialize_user(user))))
