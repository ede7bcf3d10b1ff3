"""
Shared helpers for the JSON views.

Every endpoint answers ``{"status": "success", ...}`` or
``{"status": "error", "message": "..."}``; ``json_api`` maps the domain
exceptions raised by the services to HTTP status codes.
"""

import json
import logging
from functools import wraps

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.http import HttpRequest, JsonResponse

from evaluations.services import (
    EvaluationSubmissionError,
    NoActiveQuestionnaireError,
    PlanTransitionError,
)

logger = logging.getLogger(__name__)


def load_json(request: HttpRequest) -> dict:
    """Parse the request body as a JSON object; raises ValidationError otherwise."""
    try:
        data = json.loads(request.body or b"{}")
    except (TypeError, ValueError) as exc:
        raise ValidationError("Request body must be valid JSON.") from exc
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def error_response(message: str, status: int, **extra) -> JsonResponse:
    return JsonResponse({"status": "error", "message": message, **extra}, status=status)


def json_api(view_func):
    """Translate service exceptions into JSON error responses."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except NoActiveQuestionnaireError as e:
            return error_response(str(e), 404, code="no_active_questionnaire")
        except ValidationError as e:
            return error_response(" ".join(e.messages), 400)
        except EvaluationSubmissionError as e:
            return error_response(str(e), 400)
        except ObjectDoesNotExist:
            return error_response("Not found.", 404)
        except PermissionDenied as e:
            return error_response(str(e) or "You do not have access to this resource.", 403)
        except PlanTransitionError as e:
            return error_response(str(e), 409)
        except Exception:
            logger.exception("Unhandled error in %s", view_func.__name__)
            return error_response("Internal server error.", 500)

    return wrapper


def parse_id(value, label: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {label}.") from exc
