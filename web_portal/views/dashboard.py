from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from evaluations.services import FacilityService
from users.decorators import check_user
from users.services import AuthService
from web_portal.views.common import json_api, load_json


@require_GET
@check_user
@json_api
def dashboard(request: HttpRequest):
    """Facilities of the signed-in owner with their evaluation history."""
    data = FacilityService.build_dashboard(request.user)
    return JsonResponse({"status": "success", **data})


@require_POST
@check_user
@json_api
def create_facility(request: HttpRequest):
    data = load_json(request)
    facility = FacilityService.create_facility(
        request.user,
        name=data.get("name", ""),
        region=data.get("region", ""),
        facility_type=data.get("facility_type", ""),
    )
    return JsonResponse(
        {
            "status": "success",
            "facility": {
                "id": facility.id,
                "name": facility.name,
                "region": facility.region,
                "facility_type": facility.facility_type,
            },
        },
        status=201,
    )


@require_POST
@check_user
@json_api
def give_consent(request: HttpRequest):
    user = AuthService().give_consent(request.user)
    return JsonResponse({"status": "success", "has_given_consent": user.has_given_consent})
