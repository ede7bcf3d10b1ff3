from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from users import choices
from users.managers import CustomUserManager
from users.models.base import TimeStampedModel


class CustomUser(TimeStampedModel, AbstractBaseUser, PermissionsMixin):
    """
    Login account for facility owners and administrators.

    - Authenticates with ``email`` + password through the standard Django backend.
    - ``role`` gates the administration endpoints (see ``users.decorators``).
    - ``has_given_consent`` records acceptance of the data-processing notice
      shown on first login.
    """

    email = models.EmailField(
        "E-mail",
        unique=True,
        help_text="Login identifier; stored lower-case.",
    )
    full_name = models.CharField(
        "Full name",
        max_length=150,
        blank=True,
    )
    role = models.PositiveSmallIntegerField(
        "Role",
        choices=choices.UserRole.choices,
        default=choices.UserRole.USER,
    )
    has_given_consent = models.BooleanField(
        "Consent given",
        default=False,
        help_text="Set when the user accepts the data-processing notice.",
    )
    is_active = models.BooleanField(
        "Active",
        default=True,
        help_text="Inactive accounts cannot log in.",
    )
    is_staff = models.BooleanField(
        "Back-office access",
        default=False,
        help_text="Allows logging into the Django admin site.",
    )
    date_joined = models.DateTimeField(
        "Joined at",
        auto_now_add=True,
    )

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.display_name} ({self.get_role_display()})"

    @property
    def is_admin(self) -> bool:
        return self.role == choices.UserRole.ADMIN

    @property
    def display_name(self) -> str:
        """Full name when set, otherwise the e-mail address."""

        return self.full_name or self.email
