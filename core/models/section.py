"""Questionnaire section model."""

from django.db import models


class Section(models.Model):
    """Ordered group of questions; its maximum score is the sum of its questions' ceilings."""

    questionnaire = models.ForeignKey(
        "core.Questionnaire",
        on_delete=models.CASCADE,
        related_name="sections",
        verbose_name="Questionnaire",
    )
    name = models.CharField("Name", max_length=200)
    order_index = models.PositiveIntegerField("Order", default=0)
    created_at = models.DateTimeField("Created at", auto_now_add=True)

    class Meta:
        db_table = "core_questionnaire_sections"
        verbose_name = "Section"
        verbose_name_plural = "Sections"
        ordering = ("order_index", "id")

    def __str__(self) -> str:
        return self.name
