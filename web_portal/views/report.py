from django.core.exceptions import PermissionDenied
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from evaluations.models import Evaluation
from evaluations.services.feedback import get_feedback, save_feedback
from evaluations.services.report import build_report, can_view
from users.decorators import check_user
from web_portal.views.common import json_api, load_json


def _get_visible_evaluation(request: HttpRequest, evaluation_id: int) -> Evaluation:
    evaluation = Evaluation.objects.select_related("facility", "user", "questionnaire").get(
        pk=evaluation_id
    )
    if not can_view(request.user, evaluation):
        raise PermissionDenied("You do not have access to this evaluation.")
    return evaluation


@require_GET
@check_user
@json_api
def evaluation_report(request: HttpRequest, evaluation_id: int):
    evaluation = _get_visible_evaluation(request, evaluation_id)
    report = build_report(evaluation, include_draft_plan=request.user.is_admin)
    return JsonResponse({"status": "success", "report": report})


@require_http_methods(["GET", "POST"])
@check_user
@json_api
def evaluation_feedback(request: HttpRequest, evaluation_id: int):
    """Feedback on the plan's actionable measures; only the respondent may write it."""
    evaluation = _get_visible_evaluation(request, evaluation_id)
    if request.method == "GET":
        return JsonResponse({"status": "success", "feedback": get_feedback(evaluation)})

    if evaluation.user_id != request.user.id:
        raise PermissionDenied("Only the respondent can give feedback on this plan.")
    data = load_json(request)
    items = save_feedback(evaluation, request.user, data.get("feedback"))
    return JsonResponse({"status": "success", "feedback": items})
