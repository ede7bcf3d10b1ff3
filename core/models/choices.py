"""Enumerations shared by the questionnaire models."""

from django.db import models


class QuestionType(models.TextChoices):
    SINGLE = "SINGLE", "Single choice"
    MULTIPLE = "MULTIPLE", "Multiple choice"
    TEXT = "TEXT", "Free text"
