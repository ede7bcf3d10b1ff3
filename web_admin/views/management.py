"""Dashboard statistics, accounts and facilities."""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from evaluations.services import admin_stats
from users.decorators import check_admin
from users.services import UserService
from web_portal.views.common import json_api, load_json


@require_GET
@check_admin
@json_api
def stats(request: HttpRequest):
    return JsonResponse({"status": "success", "stats": admin_stats.get_dashboard_stats()})


@require_GET
@check_admin
@json_api
def user_list(request: HttpRequest):
    return JsonResponse({"status": "success", "users": UserService.list_users_with_stats()})


@require_POST
@check_admin
@json_api
def user_role(request: HttpRequest, user_id: int):
    data = load_json(request)
    user = UserService.change_role(request.user, user_id, data.get("role"))
    return JsonResponse(
        {
            "status": "success",
            "user": {"id": user.id, "role": user.role, "role_display": user.get_role_display()},
        }
    )


@require_GET
@check_admin
@json_api
def facility_list(request: HttpRequest):
    return JsonResponse(
        {"status": "success", "facilities": admin_stats.list_facilities_with_stats()}
    )


@require_POST
@check_admin
@json_api
def facility_toggle(request: HttpRequest, facility_id: int):
    facility = admin_stats.toggle_facility(facility_id)
    return JsonResponse(
        {"status": "success", "facility": {"id": facility.id, "is_active": facility.is_active}}
    )
