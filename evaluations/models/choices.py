from django.db import models


class PlanStatus(models.TextChoices):
    """Improvement plan lifecycle: not_generated -> generating -> draft -> published."""

    NOT_GENERATED = "not_generated", "Not generated"
    GENERATING = "generating", "Generating"
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class MeasureFeedback(models.TextChoices):
    """How feasible the respondent thinks a recommended measure is."""

    EASY = "easy", "Easy to implement"
    CHALLENGING = "challenging", "Challenging"
    NOT_FEASIBLE = "not_feasible", "Not feasible"
