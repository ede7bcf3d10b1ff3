"""Evaluation report assembled from a stored evaluation."""

from __future__ import annotations

from typing import Any, Dict, List

from core.service.questionnaire import QuestionnaireService
from core.service.recommendations import derive_recommendations
from core.service.risk_levels import report_risk_level, report_risk_message, score_gradient
from core.service.scoring import answers_from_rows, fraction_to_percentage
from evaluations.models import Evaluation
from evaluations.services.plans import PlanService

NOT_AVAILABLE = "N/A"


def can_view(user, evaluation: Evaluation) -> bool:
    """Administrators see every report; respondents only their own."""
    if not user.is_authenticated:
        return False
    return bool(user.is_admin or evaluation.user_id == user.id)


def stored_answers(evaluation: Evaluation):
    return answers_from_rows(
        {
            "question_id": row["question_id"],
            "selected_option_ids": row["selected_options"],
            "text_answer": row["text_answer"],
        }
        for row in evaluation.answers.values("question_id", "selected_options", "text_answer")
    )


def _score_block(fraction) -> Dict[str, Any]:
    percentage = fraction_to_percentage(fraction)
    return {
        "fraction": fraction,
        "percentage": percentage,
        "display": f"{percentage:.1f}%",
        "risk": report_risk_level(fraction).as_dict(),
        "gradient": score_gradient(percentage),
    }


def build_section_rows(evaluation: Evaluation, tree: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    One row per section of the questionnaire as it is now.

    Sections added after the evaluation have no stored score and render as
    N/A; sections deleted since then are simply absent.
    """
    stored = evaluation.section_score_map
    rows = []
    for section in tree["sections"]:
        fraction = stored.get(section["id"])
        if fraction is None:
            row = {
                "fraction": None,
                "percentage": None,
                "display": NOT_AVAILABLE,
                "risk": report_risk_level(0).as_dict(),
                "gradient": score_gradient(0),
            }
        else:
            row = _score_block(fraction)
        rows.append({"section_id": section["id"], "name": section["name"], **row})
    return rows


def build_report(evaluation: Evaluation, include_draft_plan: bool = False) -> Dict[str, Any]:
    """
    [Purpose] Full report of one evaluation: scores, risk, section rows,
    recommendations and the plan.
    [Usage] Respondent and admin report endpoints; check can_view first.
    [Args] include_draft_plan: expose an unpublished plan, for administrators only.
    [Returns] dict ready for JsonResponse.
    """
    tree = QuestionnaireService.get_questionnaire_tree(evaluation.questionnaire_id) or {
        "name": "",
        "version": None,
        "sections": [],
    }
    facility = evaluation.facility
    recommendations = derive_recommendations(tree, stored_answers(evaluation))

    return {
        "evaluation": {
            "id": evaluation.id,
            "created_at": evaluation.created_at.isoformat(),
            "questionnaire": {"name": tree["name"], "version": tree["version"]},
            "submitted_by": evaluation.user.email,
        },
        "facility": {
            "id": facility.id,
            "name": facility.name,
            "region": facility.region,
            "facility_type": facility.facility_type,
        },
        "total": {
            **_score_block(evaluation.total_score),
            "message": report_risk_message(evaluation.total_score),
        },
        "sections": build_section_rows(evaluation, tree),
        "recommendations": [r.as_dict() for r in recommendations],
        "plan": PlanService.serialize_plan(evaluation, include_draft=include_draft_plan),
    }
