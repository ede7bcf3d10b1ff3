import hmac
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from evaluations.services import PlanService
from web_portal.views.common import error_response, json_api, load_json

logger = logging.getLogger(__name__)

TOKEN_HEADER = "HTTP_X_PLAN_TOKEN"


def _token_matches(request: HttpRequest) -> bool:
    expected = settings.PLAN_GENERATION.get("CALLBACK_TOKEN") or ""
    supplied = request.META.get(TOKEN_HEADER, "")
    if not expected:
        return False
    return hmac.compare_digest(expected.encode(), supplied.encode())


@csrf_exempt  # called by the external plan generator, not a browser
@require_POST
@json_api
def plan_callback(request: HttpRequest, evaluation_id: int):
    """
    Receives a generated plan: ``{"content": "<markdown>", "actionable_measures": [...]}``.

    The plan lands as a draft for an administrator to review and publish.
    """
    if not _token_matches(request):
        logger.warning("Rejected plan callback for evaluation %s: bad token", evaluation_id)
        return error_response("Invalid token.", 403)

    data = load_json(request)
    evaluation = PlanService.store_generated_plan(
        evaluation_id,
        data.get("content"),
        data.get("actionable_measures"),
    )
    logger.info("Plan received for evaluation %s", evaluation_id)
    return JsonResponse({"status": "success", "plan_status": evaluation.plan_status})
