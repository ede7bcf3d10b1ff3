from django.conf import settings
from django.db import models

from users.models.base import TimeStampedModel

from .choices import MeasureFeedback


class FeedbackMeasure(TimeStampedModel):
    """Respondent opinion on one actionable measure of a published plan."""

    evaluation = models.ForeignKey(
        "evaluations.Evaluation",
        on_delete=models.CASCADE,
        related_name="feedback_measures",
        verbose_name="Evaluation",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="feedback_measures",
        verbose_name="User",
    )
    measure_text = models.CharField("Measure", max_length=500)
    category = models.CharField("Category", max_length=100, blank=True, default="")
    user_feedback = models.CharField(
        "Feasibility",
        max_length=20,
        choices=MeasureFeedback.choices,
        null=True,
        blank=True,
    )
    user_comment = models.TextField("Comment", null=True, blank=True)

    class Meta:
        db_table = "evaluations_feedback_measures"
        verbose_name = "Measure feedback"
        verbose_name_plural = "Measure feedback"
        ordering = ("id",)
        constraints = [
            models.UniqueConstraint(
                fields=["evaluation", "measure_text"],
                name="uniq_feedback_measure_per_evaluation",
            )
        ]

    def __str__(self) -> str:
        return self.measure_text[:50]
