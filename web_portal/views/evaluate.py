"""Evaluation form, live scoring and submission."""

import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.service.questionnaire import jsonable_tree
from evaluations.services import EvaluationSubmissionService
from users.decorators import check_user
from web_portal.views.common import json_api, load_json, parse_id

logger = logging.getLogger(__name__)


@require_GET
@check_user
@json_api
def questionnaire(request: HttpRequest):
    """Active questionnaire tree; 404 with ``no_active_questionnaire`` when none is active."""
    tree = EvaluationSubmissionService.get_form()
    return JsonResponse({"status": "success", "questionnaire": jsonable_tree(tree)})


@require_GET
@check_user
@json_api
def prefill(request: HttpRequest):
    facility_id = parse_id(request.GET.get("facility"), "facility")
    data = EvaluationSubmissionService.get_prefill_answers(request.user, facility_id)
    return JsonResponse({"status": "success", **data})


@require_POST
@check_user
@json_api
def score(request: HttpRequest):
    """Scores for the answers given so far; nothing is stored."""
    data = load_json(request)
    sheet = EvaluationSubmissionService.score(data.get("answers"))
    return JsonResponse({"status": "success", "scores": sheet.as_dict()})


@require_POST
@check_user
@json_api
def submit(request: HttpRequest):
    data = load_json(request)
    facility_id = parse_id(data.get("facility_id"), "facility")
    result = EvaluationSubmissionService.submit(request.user, facility_id, data.get("answers"))
    return JsonResponse(
        {
            "status": "success",
            "evaluation_id": result.evaluation.id,
            "scores": result.scores.as_dict(),
            "answers_saved": result.answers_saved,
        },
        status=201,
    )
