"""Questionnaire question model."""

from django.db import models

from . import choices


class Question(models.Model):
    """A question within a section."""

    section = models.ForeignKey(
        "core.Section",
        on_delete=models.CASCADE,
        related_name="questions",
        verbose_name="Section",
    )
    text = models.TextField("Question")
    q_type = models.CharField(
        "Type",
        max_length=20,
        choices=choices.QuestionType.choices,
        default=choices.QuestionType.SINGLE,
    )
    order_index = models.PositiveIntegerField("Order", default=0)
    improvement_tip = models.TextField(
        "Improvement tip",
        blank=True,
        default="",
        help_text="Shown on the report when the selected answer is not the best practice.",
    )
    created_at = models.DateTimeField("Created at", auto_now_add=True)

    class Meta:
        db_table = "core_questionnaire_questions"
        verbose_name = "Question"
        verbose_name_plural = "Questions"
        ordering = ("order_index", "id")

    def __str__(self) -> str:
        return self.text[:50]
