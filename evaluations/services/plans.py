"""Improvement plan lifecycle for evaluations."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import markdown
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from evaluations.models import Evaluation
from evaluations.models.choices import PlanStatus

logger = logging.getLogger(__name__)


class PlanTransitionError(Exception):
    """Raised when a plan action is not allowed from the plan's current status."""


# Target statuses reachable from each status. Published plans are final.
ALLOWED_TRANSITIONS = {
    PlanStatus.NOT_GENERATED: {PlanStatus.GENERATING, PlanStatus.DRAFT},
    PlanStatus.GENERATING: {PlanStatus.GENERATING, PlanStatus.DRAFT, PlanStatus.NOT_GENERATED},
    PlanStatus.DRAFT: {PlanStatus.DRAFT, PlanStatus.GENERATING, PlanStatus.PUBLISHED},
    PlanStatus.PUBLISHED: set(),
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, set())


def render_plan_html(content: str) -> str:
    return markdown.markdown(content or "", extensions=["extra"])


def normalize_measures(raw: Any) -> List[Dict[str, str]]:
    """
    Coerce actionable measures to ``[{"measure": str, "category": str}]``.

    Accepts the list itself, a JSON string holding it, or plain strings as items.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise ValidationError("actionable_measures is not valid JSON.") from exc
    if not isinstance(raw, list):
        raise ValidationError("actionable_measures must be a list.")

    measures: List[Dict[str, str]] = []
    seen = set()
    for item in raw:
        if isinstance(item, str):
            measure, category = item, ""
        elif isinstance(item, dict):
            measure = item.get("measure") or ""
            category = item.get("category") or ""
        else:
            raise ValidationError("Each actionable measure must be a string or an object.")
        measure = str(measure).strip()
        if not measure or measure in seen:
            continue
        seen.add(measure)
        measures.append({"measure": measure[:500], "category": str(category).strip()[:100]})
    return measures


class PlanService:
    """
    Drives ``Evaluation.plan_status`` through
    not_generated -> generating -> draft -> published.

    Every method locks the evaluation row, checks the transition and raises
    ``PlanTransitionError`` when it is not allowed.
    """

    @staticmethod
    def _transition(
        evaluation_id: int,
        target: str,
        from_statuses: Optional[Iterable[str]] = None,
        **fields: Any,
    ) -> Evaluation:
        with transaction.atomic():
            evaluation = Evaluation.objects.select_for_update().get(pk=evaluation_id)
            current = evaluation.plan_status
            allowed = can_transition(current, target)
            if from_statuses is not None and current not in from_statuses:
                allowed = False
            if not allowed:
                raise PlanTransitionError(
                    f"Plan of evaluation {evaluation_id} cannot go from '{current}' to '{target}'."
                )
            evaluation.plan_status = target
            for name, value in fields.items():
                setattr(evaluation, name, value)
            evaluation.plan_updated_at = timezone.now()
            evaluation.save(update_fields=["plan_status", "plan_updated_at", *fields.keys()])

        logger.info("Evaluation %s plan: %s -> %s", evaluation_id, current, target)
        return evaluation

    @staticmethod
    def mark_generating(evaluation_id: int, force: bool = False) -> Evaluation:
        """
        [Purpose] Flag the plan as being generated before the generator is called.
        [Usage] notify_plan_generation; the admin "regenerate" action passes force=True.
        [Args] force: also restart a plan that is already generating, e.g. after a lost callback.
        [Returns] The updated Evaluation; PlanTransitionError when the plan is published.
        """
        from_statuses = None if force else {PlanStatus.NOT_GENERATED, PlanStatus.DRAFT}
        return PlanService._transition(evaluation_id, PlanStatus.GENERATING, from_statuses=from_statuses)

    @staticmethod
    def reset_after_failure(evaluation_id: int) -> Evaluation:
        """
        [Purpose] Return a generating plan to not_generated.
        [Usage] Webhook failures and the "Reset stuck plan generation" admin action.
        [Returns] The updated Evaluation; PlanTransitionError unless the plan is generating.
        """
        return PlanService._transition(evaluation_id, PlanStatus.NOT_GENERATED)

    @staticmethod
    def store_generated_plan(
        evaluation_id: int, content: str, actionable_measures: Any = None
    ) -> Evaluation:
        """
        [Purpose] Store the plan delivered by the external generator as a draft.
        [Usage] The plan callback view.
        [Args] content: Markdown plan text, required; actionable_measures: see normalize_measures.
        [Returns] The updated Evaluation; PlanTransitionError unless the plan is generating.
        """
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Plan content is required.")
        return PlanService._transition(
            evaluation_id,
            PlanStatus.DRAFT,
            from_statuses={PlanStatus.GENERATING},
            plan_content=content,
            actionable_measures=normalize_measures(actionable_measures),
        )

    @staticmethod
    def save_draft(
        evaluation_id: int, content: str, actionable_measures: Any = None
    ) -> Evaluation:
        """
        [Purpose] Save an administrator's edits as the draft plan.
        [Usage] Admin plan editor. Saving over a generating plan discards that generation,
        so a late callback for it is rejected.
        [Args] content: Markdown plan text; actionable_measures: None keeps the stored list.
        [Returns] The updated Evaluation; PlanTransitionError once published.
        """
        if not isinstance(content, str):
            raise ValidationError("Plan content must be text.")
        fields: Dict[str, Any] = {"plan_content": content}
        if actionable_measures is not None:
            fields["actionable_measures"] = normalize_measures(actionable_measures)
        return PlanService._transition(
            evaluation_id,
            PlanStatus.DRAFT,
            from_statuses={PlanStatus.NOT_GENERATED, PlanStatus.GENERATING, PlanStatus.DRAFT},
            **fields,
        )

    @staticmethod
    def publish(evaluation_id: int, content: Optional[str] = None) -> Evaluation:
        """
        [Purpose] Publish the draft so the facility owner can read it. Published plans are final.
        [Usage] Admin API and the "Publish selected draft plans" admin action.
        [Args] content: optional last edits applied in the same transaction.
        [Returns] The updated Evaluation; ValidationError for an empty draft.
        """
        fields: Dict[str, Any] = {}
        if content is not None:
            if not isinstance(content, str):
                raise ValidationError("Plan content must be text.")
            fields["plan_content"] = content
        with transaction.atomic():
            evaluation = Evaluation.objects.select_for_update().get(pk=evaluation_id)
            final_content = fields.get("plan_content", evaluation.plan_content)
            if evaluation.plan_status == PlanStatus.DRAFT and not (final_content or "").strip():
                raise ValidationError("An empty plan cannot be published.")
            return PlanService._transition(evaluation_id, PlanStatus.PUBLISHED, **fields)

    @staticmethod
    def serialize_plan(evaluation: Evaluation, include_draft: bool = False) -> Dict[str, Any]:
        """
        [Purpose] Plan block for API responses.
        [Usage] Report and admin plan views.
        [Args] include_draft: expose unpublished content, for administrators only.
        [Returns] dict with status, status_label, content, html, actionable_measures,
        updated_at and is_editable.
        """
        visible = include_draft or evaluation.plan_status == PlanStatus.PUBLISHED
        return {
            "status": evaluation.plan_status,
            "status_label": evaluation.get_plan_status_display(),
            "content": evaluation.plan_content if visible else "",
            "html": render_plan_html(evaluation.plan_content) if visible else "",
            "actionable_measures": list(evaluation.actionable_measures or []) if visible else [],
            "updated_at": evaluation.plan_updated_at.isoformat() if evaluation.plan_updated_at else None,
            "is_editable": evaluation.plan_status != PlanStatus.PUBLISHED,
        }

    @staticmethod
    def statuses(evaluation_ids: Iterable[int]) -> Dict[int, str]:
        """
        [Purpose] Current plan status of several evaluations in one query.
        [Usage] Default status source of PlanStatusPoller.
        [Returns] ``{evaluation_id: plan_status}`` for the ids that exist.
        """
        ids = [int(i) for i in evaluation_ids]
        if not ids:
            return {}
        return dict(Evaluation.objects.filter(pk__in=ids).values_list("id", "plan_status"))
