"""Evaluation submission: score, persist, then hand off to plan generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from django.db import DatabaseError, transaction

from core.service.questionnaire import QuestionnaireService
from core.service.scoring import (
    Answer,
    ScoreSheet,
    build_answer_rows,
    calculate_scores,
    parse_answers,
    validate_answers,
)
from evaluations.models import Evaluation, EvaluationAnswer
from evaluations.services.facility import FacilityService
from evaluations.services.plan_generation import schedule_plan_generation

logger = logging.getLogger(__name__)


class EvaluationSubmissionError(Exception):
    """Base class for submission failures shown to the respondent."""


class NoActiveQuestionnaireError(EvaluationSubmissionError):
    """No questionnaire is active, so nothing can be filled in or scored."""

    def __init__(self, message: str = "There is no active questionnaire at the moment.") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class SubmissionResult:
    evaluation: Evaluation
    scores: ScoreSheet
    answers_saved: bool


class EvaluationSubmissionService:
    """Respondent-side evaluation flow."""

    @staticmethod
    def get_form() -> Dict[str, Any]:
        """[Purpose] Questionnaire tree shown to respondents. [Returns] The active tree; NoActiveQuestionnaireError when there is none."""
        tree = QuestionnaireService.get_active_questionnaire_tree()
        if tree is None:
            raise NoActiveQuestionnaireError()
        return tree

    @classmethod
    def score(cls, answers_data: Any) -> ScoreSheet:
        """
        [Purpose] Live scoring of unsaved answers against the active questionnaire.
        [Usage] Score preview while the form is being filled in; nothing is stored.
        [Args] answers_data: raw answers as posted, see parse_answers.
        [Returns] ScoreSheet; ValidationError for malformed or unknown answers.
        """
        tree = cls.get_form()
        answers = parse_answers(answers_data)
        validate_answers(tree, answers)
        return calculate_scores(tree, answers)

    @classmethod
    def submit(cls, user, facility_id, answers_data: Any) -> SubmissionResult:
        """
        [Purpose] Persist one evaluation.
        [Usage] Respondent submit endpoint. Steps:
        1. active questionnaire and owned facility are required;
        2. answers are validated and scored;
        3. the Evaluation row is created, errors propagate to the caller;
        4. answer rows are saved in a savepoint, a failure there is logged
           and the evaluation is kept;
        5. plan generation is queued once the transaction commits.
        [Args] facility_id: must belong to ``user``; answers_data: see parse_answers.
        [Returns] SubmissionResult with the evaluation, its scores and whether answers were saved.
        """
        tree = cls.get_form()
        facility = FacilityService.get_user_facility(user, facility_id)
        answers = parse_answers(answers_data)
        validate_answers(tree, answers)
        sheet = calculate_scores(tree, answers)
        payload = sheet.to_persistence_payload()

        with transaction.atomic():
            evaluation = Evaluation.objects.create(
                facility=facility,
                questionnaire_id=tree["id"],
                user=user,
                total_score=payload["total_score"],
                section_scores=payload["section_scores"],
            )
            answers_saved = cls._save_answers(evaluation, answers)
            evaluation_id = evaluation.id
            transaction.on_commit(lambda: schedule_plan_generation(evaluation_id))

        logger.info(
            "Evaluation %s submitted by user %s for facility %s (total=%.4f, answers_saved=%s)",
            evaluation.id,
            user.pk,
            facility.pk,
            payload["total_score"],
            answers_saved,
        )
        return SubmissionResult(evaluation=evaluation, scores=sheet, answers_saved=answers_saved)

    @staticmethod
    def _save_answers(evaluation: Evaluation, answers: Mapping[int, Answer]) -> bool:
        rows = build_answer_rows(answers)
        if not rows:
            return True
        try:
            with transaction.atomic():
                EvaluationAnswer.objects.bulk_create(
                    [
                        EvaluationAnswer(
                            evaluation=evaluation,
                            question_id=row["question_id"],
                            selected_options=row["selected_option_ids"],
                            text_answer=row["text_answer"],
                        )
                        for row in rows
                    ]
                )
        except DatabaseError:
            # The evaluation row stands on its own; answers are best effort.
            logger.exception(
                "Saving %d answer(s) failed for evaluation %s", len(rows), evaluation.id
            )
            return False
        return True

    @staticmethod
    def get_prefill_answers(user, facility_id) -> Dict[str, Any]:
        """
        [Purpose] Prefill the form with the facility's latest answers.
        [Usage] Only questions and options that still exist in the active
        questionnaire are kept; empty answers are dropped.
        [Args] facility_id: must belong to ``user``.
        [Returns] ``{"evaluation_id": int | None, "answers": [{"question_id", "selected_option_ids", "text_answer"}]}``.
        """
        tree = EvaluationSubmissionService.get_form()
        facility = FacilityService.get_user_facility(user, facility_id)
        latest: Optional[Evaluation] = facility.evaluations.order_by("-created_at", "-id").first()
        if latest is None:
            return {"evaluation_id": None, "answers": []}

        options_by_question: Dict[int, set] = {
            q["id"]: {opt["id"] for opt in q["options"]}
            for section in tree["sections"]
            for q in section["questions"]
        }
        prefill: List[Dict[str, Any]] = []
        for row in latest.answers.filter(question_id__in=list(options_by_question)):
            option_ids = options_by_question[row.question_id]
            selected = [oid for oid in (row.selected_options or []) if oid in option_ids]
            if not selected and not row.text_answer:
                continue
            prefill.append(
                {
                    "question_id": row.question_id,
                    "selected_option_ids": selected,
                    "text_answer": row.text_answer,
                }
            )
        return {"evaluation_id": latest.id, "answers": prefill}
