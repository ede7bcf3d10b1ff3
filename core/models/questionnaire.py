"""Questionnaire template definition."""

from django.db import models


class Questionnaire(models.Model):
    """Biosecurity questionnaire. Only one may be active at a time."""

    name = models.CharField("Name", max_length=200)
    version = models.PositiveIntegerField("Version", default=1)
    is_active = models.BooleanField(
        "Active",
        default=False,
        help_text="The active questionnaire is the one respondents fill in; activating one deactivates the rest.",
    )
    created_at = models.DateTimeField("Created at", auto_now_add=True)

    class Meta:
        db_table = "core_questionnaires"
        verbose_name = "Questionnaire"
        verbose_name_plural = "Questionnaires"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.name} (v{self.version})"
