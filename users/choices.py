from django.db import models


class UserRole(models.IntegerChoices):
    """Account role; ``CustomUser.role``. Admins manage questionnaires, users and plans."""

    USER = 1, "User"
    ADMIN = 2, "Administrator"
