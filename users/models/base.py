from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base adding ``created_at`` / ``updated_at`` audit columns.

    Inherited by accounts, facilities and feedback rows; never instantiated directly.
    """

    created_at = models.DateTimeField(
        "Created at",
        auto_now_add=True,
        db_index=True,
        help_text="Set once when the row is first written.",
    )
    updated_at = models.DateTimeField(
        "Updated at",
        auto_now=True,
        db_index=True,
        help_text="Refreshed on every ORM save.",
    )

    class Meta:
        abstract = True
