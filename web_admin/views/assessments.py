"""Assessment list, CSV exports and plan status polling."""

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from evaluations.services import PlanService, admin_stats
from evaluations.services.export import (
    build_full_csv,
    build_scores_csv,
    export_filename,
    export_queryset,
)
from users.decorators import check_admin
from web_portal.views.common import json_api, parse_id


def _csv_response(content: str, kind: str) -> HttpResponse:
    response = HttpResponse(content, content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{export_filename(kind)}"'
    return response


@require_GET
@check_admin
@json_api
def assessment_list(request: HttpRequest):
    return JsonResponse({"status": "success", "assessments": admin_stats.list_assessments()})


@require_GET
@check_admin
@json_api
def export_scores(request: HttpRequest):
    return _csv_response(build_scores_csv(export_queryset()), "scores")


@require_GET
@check_admin
@json_api
def export_full(request: HttpRequest):
    return _csv_response(build_full_csv(export_queryset()), "full")


@require_GET
@check_admin
@json_api
def plan_status(request: HttpRequest):
    """``?ids=3,4,5`` -> ``{"statuses": {"3": "generating", ...}}`` for browser pollers."""
    raw = request.GET.get("ids", "")
    ids = [parse_id(part, "evaluation id") for part in raw.split(",") if part.strip()]
    statuses = PlanService.statuses(ids)
    return JsonResponse(
        {"status": "success", "statuses": {str(pk): status for pk, status in statuses.items()}}
    )
