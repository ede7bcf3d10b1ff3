"""Plan review: read the draft, edit it, publish it or ask for a new one."""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from evaluations.models import Evaluation
from evaluations.models.choices import PlanStatus
from evaluations.services import PlanService, PlanTransitionError
from evaluations.services.plan_generation import schedule_plan_generation
from evaluations.services.plans import can_transition
from users.decorators import check_admin
from web_portal.views.common import json_api, load_json

logger = logging.getLogger(__name__)


def _plan_payload(evaluation: Evaluation) -> dict:
    return {
        "status": "success",
        "evaluation_id": evaluation.id,
        "plan": PlanService.serialize_plan(evaluation, include_draft=True),
    }


@require_GET
@check_admin
@json_api
def plan_detail(request: HttpRequest, evaluation_id: int):
    evaluation = Evaluation.objects.get(pk=evaluation_id)
    return JsonResponse(_plan_payload(evaluation))


@require_POST
@check_admin
@json_api
def plan_save(request: HttpRequest, evaluation_id: int):
    data = load_json(request)
    evaluation = PlanService.save_draft(
        evaluation_id, data.get("content", ""), data.get("actionable_measures")
    )
    return JsonResponse(_plan_payload(evaluation))


@require_POST
@check_admin
@json_api
def plan_publish(request: HttpRequest, evaluation_id: int):
    data = load_json(request)
    evaluation = PlanService.publish(evaluation_id, data.get("content"))
    logger.info("Admin %s published plan of evaluation %s", request.user.pk, evaluation_id)
    return JsonResponse(_plan_payload(evaluation))


@require_POST
@check_admin
@json_api
def plan_regenerate(request: HttpRequest, evaluation_id: int):
    """Queue a new generation; the current draft is replaced when the generator answers."""
    if not settings.PLAN_GENERATION.get("WEBHOOK_URL"):
        raise ValidationError("Plan generation is not configured.")

    evaluation = Evaluation.objects.get(pk=evaluation_id)
    if not can_transition(evaluation.plan_status, PlanStatus.GENERATING):
        raise PlanTransitionError(
            f"Plan of evaluation {evaluation_id} cannot be regenerated while '{evaluation.plan_status}'."
        )
    # A plan already generating is restarted, e.g. when the generator never called back.
    schedule_plan_generation(evaluation.id, force=True)
    return JsonResponse(
        {"status": "success", "evaluation_id": evaluation.id, "queued": True}, status=202
    )
