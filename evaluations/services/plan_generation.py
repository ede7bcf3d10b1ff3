"""
Outbound notification to the external improvement-plan generator.

After an evaluation is committed, a Celery task posts a
``PlanGenerationRequest`` to ``PLAN_GENERATION["WEBHOOK_URL"]``. The
generator answers later through the plan callback endpoint. Failures here
are logged and never reach the respondent.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from django.urls import reverse

from core.service.questionnaire import QuestionnaireService
from core.service.recommendations import derive_recommendations
from core.service.scoring import fraction_to_percentage
from evaluations.models import Evaluation
from evaluations.services.plans import PlanService, PlanTransitionError
from evaluations.services.report import stored_answers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FacilityInfo:
    id: int
    name: str
    region: str
    facility_type: str


@dataclass(frozen=True)
class RespondentInfo:
    id: int
    email: str
    full_name: str


@dataclass(frozen=True)
class QuestionnaireInfo:
    id: int
    name: str
    version: int


@dataclass(frozen=True)
class SectionScoreInfo:
    section_id: int
    name: str
    score: Optional[float]
    percentage: Optional[float]


@dataclass(frozen=True)
class AnswerInfo:
    question_id: int
    section_name: str
    question_text: str
    question_type: str
    selected_options: List[str]
    text_answer: Optional[str]


@dataclass(frozen=True)
class RecommendationInfo:
    section_name: str
    question_text: str
    current_answer: str
    recommendation: str


@dataclass(frozen=True)
class PlanGenerationRequest:
    """Everything the generator needs to write a plan for one evaluation."""

    evaluation_id: int
    submitted_at: str
    callback_url: str
    facility: FacilityInfo
    respondent: RespondentInfo
    questionnaire: QuestionnaireInfo
    total_score: float
    total_percentage: float
    sections: List[SectionScoreInfo]
    answers: List[AnswerInfo]
    recommendations: List[RecommendationInfo]

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)


def _callback_url(evaluation_id: int) -> str:
    base = (settings.PLAN_GENERATION.get("CALLBACK_BASE_URL") or "").rstrip("/")
    if not base:
        return ""
    return base + reverse("plan_callback", args=[evaluation_id])


def build_plan_request(evaluation: Evaluation) -> PlanGenerationRequest:
    """Assemble the request from the evaluation, its stored answers and its questionnaire."""
    facility = evaluation.facility
    user = evaluation.user
    questionnaire = evaluation.questionnaire
    tree = QuestionnaireService.get_questionnaire_tree(questionnaire.id) or {"sections": []}

    answers = stored_answers(evaluation)

    stored_scores = evaluation.section_score_map
    sections = []
    answer_infos = []
    for section in tree["sections"]:
        fraction = stored_scores.get(section["id"])
        sections.append(
            SectionScoreInfo(
                section_id=section["id"],
                name=section["name"],
                score=fraction,
                percentage=fraction_to_percentage(fraction) if fraction is not None else None,
            )
        )
        for question in section["questions"]:
            answer = answers.get(question["id"])
            if answer is None:
                continue
            answer_infos.append(
                AnswerInfo(
                    question_id=question["id"],
                    section_name=section["name"],
                    question_text=question["text"],
                    question_type=question["q_type"],
                    selected_options=[
                        opt["text"]
                        for opt in question["options"]
                        if opt["id"] in answer.selected_option_ids
                    ],
                    text_answer=answer.text_answer,
                )
            )

    return PlanGenerationRequest(
        evaluation_id=evaluation.id,
        submitted_at=evaluation.created_at.isoformat(),
        callback_url=_callback_url(evaluation.id),
        facility=FacilityInfo(
            id=facility.id,
            name=facility.name,
            region=facility.region,
            facility_type=facility.facility_type,
        ),
        respondent=RespondentInfo(id=user.id, email=user.email, full_name=user.full_name),
        questionnaire=QuestionnaireInfo(
            id=questionnaire.id, name=questionnaire.name, version=questionnaire.version
        ),
        total_score=evaluation.total_score,
        total_percentage=fraction_to_percentage(evaluation.total_score),
        sections=sections,
        answers=answer_infos,
        recommendations=[
            RecommendationInfo(
                section_name=r.section_name,
                question_text=r.question_text,
                current_answer=r.current_answer,
                recommendation=r.recommendation,
            )
            for r in derive_recommendations(tree, answers)
        ],
    )


def notify_plan_generation(evaluation_id: int, force: bool = False) -> bool:
    """
    [Purpose] Ask the external generator for a plan.
    - no webhook configured: logged and skipped;
    - the plan is marked ``generating`` before the request goes out;
    - any failure while building or sending the request resets it to ``not_generated``.
    [Usage] Celery task queued by schedule_plan_generation.
    [Args] force: restart a plan that is already generating.
    [Returns] True when the generator accepted the request.
    """
    config = settings.PLAN_GENERATION
    url = config.get("WEBHOOK_URL")
    if not url:
        logger.info("Plan webhook not configured, skipping evaluation %s", evaluation_id)
        return False

    evaluation = (
        Evaluation.objects.select_related("facility", "user", "questionnaire")
        .filter(pk=evaluation_id)
        .first()
    )
    if evaluation is None:
        logger.warning("Plan generation requested for missing evaluation %s", evaluation_id)
        return False

    try:
        PlanService.mark_generating(evaluation_id, force=force)
    except PlanTransitionError as exc:
        logger.warning("Plan generation not started: %s", exc)
        return False

    headers = {"Content-Type": "application/json"}
    token = config.get("WEBHOOK_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        payload = build_plan_request(evaluation).to_payload()
        response = requests.post(
            url, json=payload, headers=headers, timeout=config.get("TIMEOUT", 10)
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Plan webhook failed for evaluation %s: %s", evaluation_id, exc)
        _reset_status(evaluation_id)
        return False
    except Exception:  # noqa: BLE001
        logger.exception("Could not build plan request for evaluation %s", evaluation_id)
        _reset_status(evaluation_id)
        return False

    logger.info("Plan generation requested for evaluation %s", evaluation_id)
    return True


def _reset_status(evaluation_id: int) -> None:
    try:
        PlanService.reset_after_failure(evaluation_id)
    except PlanTransitionError as exc:
        logger.warning("Plan status left unchanged: %s", exc)


def schedule_plan_generation(evaluation_id: int, force: bool = False) -> None:
    """
    [Purpose] Queue the notification task; a broker outage is logged, never raised.
    [Usage] After an evaluation is committed, and by the admin "regenerate" endpoint.
    [Args] force: see notify_plan_generation.
    """
    try:
        from evaluations.tasks import notify_plan_generation_task

        notify_plan_generation_task.delay(evaluation_id, force=force)
    except Exception:  # noqa: BLE001
        logger.exception("Could not enqueue plan generation for evaluation %s", evaluation_id)
