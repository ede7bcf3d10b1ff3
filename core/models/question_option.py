"""Answer option model."""

from django.db import models


class QuestionOption(models.Model):
    """Answer option. Higher scores mean higher risk; scores may be negative."""

    question = models.ForeignKey(
        "core.Question",
        on_delete=models.CASCADE,
        related_name="options",
        verbose_name="Question",
    )
    text = models.CharField("Text", max_length=500)
    score = models.DecimalField(
        "Score", max_digits=8, decimal_places=2, default=0, help_text="Risk points for this option."
    )
    order_index = models.PositiveIntegerField("Order", default=0)
    created_at = models.DateTimeField("Created at", auto_now_add=True)

    class Meta:
        db_table = "core_questionnaire_options"
        verbose_name = "Option"
        verbose_name_plural = "Options"
        ordering = ("order_index", "id")

    def __str__(self) -> str:
        return f"{self.text} ({self.score})"
