"""Submitted questionnaire evaluation."""

from django.conf import settings
from django.db import models

from .choices import PlanStatus


class Evaluation(models.Model):
    """
    One submission of the active questionnaire for a facility.

    Scores are stored as 0..1 fractions. ``section_scores`` is a list of
    ``{"section_id": int, "score": float}`` in questionnaire order at
    submission time. Apart from the plan fields the row is never updated.
    """

    facility = models.ForeignKey(
        "evaluations.Facility",
        on_delete=models.CASCADE,
        related_name="evaluations",
        verbose_name="Facility",
    )
    questionnaire = models.ForeignKey(
        "core.Questionnaire",
        on_delete=models.PROTECT,
        related_name="evaluations",
        verbose_name="Questionnaire",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="evaluations",
        verbose_name="Submitted by",
    )
    total_score = models.FloatField("Total score", default=0.0)
    section_scores = models.JSONField("Section scores", default=list, blank=True)
    created_at = models.DateTimeField("Submitted at", auto_now_add=True, db_index=True)

    plan_status = models.CharField(
        "Plan status",
        max_length=20,
        choices=PlanStatus.choices,
        default=PlanStatus.NOT_GENERATED,
        db_index=True,
    )
    plan_content = models.TextField("Plan (Markdown)", blank=True, default="")
    actionable_measures = models.JSONField(
        "Actionable measures",
        default=list,
        blank=True,
        help_text='List of {"measure": str, "category": str} returned with the plan.',
    )
    plan_updated_at = models.DateTimeField("Plan updated at", null=True, blank=True)

    class Meta:
        db_table = "evaluations_evaluations"
        verbose_name = "Evaluation"
        verbose_name_plural = "Evaluations"
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return f"Evaluation #{self.pk} ({self.facility})"

    @property
    def section_score_map(self) -> dict:
        """``{section_id: fraction}`` view of ``section_scores``."""
        result = {}
        for item in self.section_scores or []:
            if isinstance(item, dict) and item.get("section_id") is not None:
                result[item["section_id"]] = item.get("score")
        return result
