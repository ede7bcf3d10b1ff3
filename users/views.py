import json
import logging

from django.core.exceptions import ValidationError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from users.decorators import check_user
from users.services import AuthService

logger = logging.getLogger(__name__)


def _serialize_user(user) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role,
        "is_admin": user.is_admin,
        "has_given_consent": user.has_given_consent,
        "created_at": user.created_at.isoformat(),
    }


def _load_json(request: HttpRequest) -> dict:
    try:
        data = json.loads(request.body or b"{}")
    except (TypeError, ValueError) as exc:
        raise ValidationError("Request body must be valid JSON.") from exc
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


@require_GET
@ensure_csrf_cookie
def csrf(request: HttpRequest):
    """Sets the CSRF cookie for the single-page front end."""
    return JsonResponse({"status": "success"})


@require_POST
def register(request: HttpRequest):
    try:
        data = _load_json(request)
        service = AuthService()
        user = service.register(
            email=data.get("email", ""),
            password=data.get("password", ""),
            full_name=data.get("full_name", ""),
        )
        service.login(request, user.email, data.get("password", ""))
        return JsonResponse({"status": "success", "user": _serialize_user(user)}, status=201)
    except ValidationError as e:
        return JsonResponse({"status": "error", "message": " ".join(e.messages)}, status=400)


@require_POST
def login_view(request: HttpRequest):
    try:
        data = _load_json(request)
    except ValidationError as e:
        return JsonResponse({"status": "error", "message": " ".join(e.messages)}, status=400)

    ok, result = AuthService().login(request, data.get("email", ""), data.get("password", ""))
    if not ok:
        return JsonResponse({"status": "error", "message": result}, status=400)
    return JsonResponse({"status": "success", "user": _serialize_user(result)})


@require_POST
def logout_view(request: HttpRequest):
    AuthService().logout(request)
    return JsonResponse({"status": "success"})


@require_GET
@check_user
def me(request: HttpRequest):
    return JsonResponse({"status": "success", "user": _serialize_user(request.user)})


@require_POST
@check_user
def give_consent(request: HttpRequest):
    user = AuthService().give_consent(request.user)
    return JsonResponse({"status": "success", "user": _serialize_user(user)})
