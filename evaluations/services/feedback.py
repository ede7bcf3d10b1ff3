"""Respondent feedback on the actionable measures of a published plan."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from django.core.exceptions import ValidationError
from django.db import transaction

from evaluations.models import Evaluation, FeedbackMeasure
from evaluations.models.choices import MeasureFeedback, PlanStatus

logger = logging.getLogger(__name__)


def get_feedback(evaluation: Evaluation) -> List[Dict[str, Any]]:
    """
    [Purpose] Feedback form of a plan: one entry per actionable measure, in plan order,
    merged with any saved feedback.
    [Returns]::

        [{"measure": "...", "category": "...", "user_feedback": "easy", "user_comment": None}]
    """
    saved = {fb.measure_text: fb for fb in evaluation.feedback_measures.all()}
    items = []
    for measure in evaluation.actionable_measures or []:
        text = measure.get("measure", "")
        fb = saved.get(text)
        items.append(
            {
                "measure": text,
                "category": measure.get("category", ""),
                "user_feedback": fb.user_feedback if fb else None,
                "user_comment": fb.user_comment if fb else None,
            }
        )
    return items


@transaction.atomic
def save_feedback(evaluation: Evaluation, user, items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    [Purpose] Upsert feedback rows keyed by ``(evaluation, measure_text)``.
    [Usage] Respondent feedback endpoint. Only measures of the published plan are
    accepted; empty feedback and comment are stored as NULL.
    [Args] items: ``[{"measure": str, "user_feedback": str, "user_comment": str}]``.
    [Returns] The merged feedback list, see get_feedback.
    """
    if evaluation.plan_status != PlanStatus.PUBLISHED:
        raise ValidationError("Feedback can only be given on a published plan.")
    if not isinstance(items, list):
        raise ValidationError("Feedback must be a list.")

    categories = {
        m.get("measure"): m.get("category", "") for m in evaluation.actionable_measures or []
    }
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("Each feedback item must be an object.")
        measure = (item.get("measure") or "").strip()
        if measure not in categories:
            raise ValidationError(f"Unknown measure: {measure!r}.")
        value = item.get("user_feedback") or None
        if value is not None and value not in MeasureFeedback.values:
            raise ValidationError(f"Invalid feedback value: {value!r}.")
        comment = (item.get("user_comment") or "").strip() or None

        FeedbackMeasure.objects.update_or_create(
            evaluation=evaluation,
            measure_text=measure,
            defaults={
                "user": user,
                "category": categories[measure],
                "user_feedback": value,
                "user_comment": comment,
            },
        )

    logger.info("User %s saved feedback for evaluation %s", user.pk, evaluation.pk)
    return get_feedback(evaluation)
