"""Equine facility owned by a respondent."""

from django.conf import settings
from django.db import models

from users.models.base import TimeStampedModel


class Facility(TimeStampedModel):
    """A yard, stud or riding centre that gets evaluated."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="facilities",
        verbose_name="Owner",
    )
    name = models.CharField("Name", max_length=200)
    region = models.CharField("Region", max_length=100, blank=True)
    facility_type = models.CharField(
        "Type",
        max_length=100,
        blank=True,
        help_text="Free text, e.g. stud farm, riding school, livery yard.",
    )
    is_active = models.BooleanField(
        "Active",
        default=True,
        help_text="Inactive facilities are hidden from the owner's dashboard.",
    )

    class Meta:
        db_table = "evaluations_facilities"
        verbose_name = "Facility"
        verbose_name_plural = "Facilities"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return self.name
