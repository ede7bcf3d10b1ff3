"""Questionnaire builder endpoints."""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.service.questionnaire import QuestionnaireService, jsonable_tree
from users.decorators import check_admin
from web_portal.views.common import error_response, json_api, load_json


@require_http_methods(["GET", "POST"])
@check_admin
@json_api
def questionnaire_list(request: HttpRequest):
    """GET lists every questionnaire; POST ``{"name": ...}`` creates an inactive one."""
    if request.method == "GET":
        return JsonResponse(
            {"status": "success", "questionnaires": QuestionnaireService.list_questionnaires()}
        )

    data = load_json(request)
    questionnaire = QuestionnaireService.create_questionnaire(data.get("name", ""))
    return JsonResponse(
        {
            "status": "success",
            "questionnaire": {
                "id": questionnaire.id,
                "name": questionnaire.name,
                "version": questionnaire.version,
                "is_active": questionnaire.is_active,
            },
        },
        status=201,
    )


@require_http_methods(["GET", "DELETE"])
@check_admin
@json_api
def questionnaire_detail(request: HttpRequest, questionnaire_id: int):
    if request.method == "DELETE":
        QuestionnaireService.delete_questionnaire(questionnaire_id)
        return JsonResponse({"status": "success"})

    tree = QuestionnaireService.get_questionnaire_tree(questionnaire_id)
    if tree is None:
        return error_response("Not found.", 404)
    return JsonResponse({"status": "success", "questionnaire": jsonable_tree(tree)})


@require_POST
@check_admin
@json_api
def questionnaire_toggle(request: HttpRequest, questionnaire_id: int):
    """``{"active": true}`` activates (and deactivates all others); false deactivates."""
    data = load_json(request)
    questionnaire = QuestionnaireService.set_active(questionnaire_id, bool(data.get("active")))
    return JsonResponse(
        {
            "status": "success",
            "questionnaire": {"id": questionnaire.id, "is_active": questionnaire.is_active},
        }
    )


@require_POST
@check_admin
@json_api
def section_create(request: HttpRequest, questionnaire_id: int):
    data = load_json(request)
    section = QuestionnaireService.add_section(questionnaire_id, data.get("name", ""))
    return JsonResponse(
        {
            "status": "success",
            "section": {"id": section.id, "name": section.name, "order_index": section.order_index},
        },
        status=201,
    )


@require_http_methods(["POST", "DELETE"])
@check_admin
@json_api
def section_detail(request: HttpRequest, section_id: int):
    if request.method == "DELETE":
        QuestionnaireService.delete_section(section_id)
        return JsonResponse({"status": "success"})

    data = load_json(request)
    section = QuestionnaireService.rename_section(section_id, data.get("name", ""))
    return JsonResponse({"status": "success", "section": {"id": section.id, "name": section.name}})


@require_POST
@check_admin
@json_api
def question_save(request: HttpRequest, section_id: int):
    """
    Create or update a question of a section.

    Body: ``{"question_id": null, "text": "...", "q_type": "single",
    "improvement_tip": "...", "options": [{"text": "Always", "score": 0}]}``
    """
    data = load_json(request)
    options = data.get("options") or []
    if not isinstance(options, list) or not all(isinstance(o, dict) for o in options):
        return error_response("options must be a list of objects.", 400)

    question = QuestionnaireService.save_question(
        section_id,
        data.get("text", ""),
        data.get("q_type", ""),
        options=options,
        improvement_tip=data.get("improvement_tip", ""),
        question_id=data.get("question_id"),
    )
    return JsonResponse(
        {
            "status": "success",
            "question": {
                "id": question.id,
                "text": question.text,
                "q_type": question.q_type,
                "options": [
                    {"id": opt.id, "text": opt.text, "score": float(opt.score)}
                    for opt in question.options.order_by("order_index", "id")
                ],
            },
        }
    )


@require_http_methods(["DELETE"])
@check_admin
@json_api
def question_delete(request: HttpRequest, question_id: int):
    QuestionnaireService.delete_question(question_id)
    return JsonResponse({"status": "success"})
