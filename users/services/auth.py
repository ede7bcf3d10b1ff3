"""
Auth-related service utilities.
"""

import logging
from typing import Optional, Tuple

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from users.models import CustomUser

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, session login/logout and consent, kept in one place so every entry point behaves the same."""

    def register(self, email: str, password: str, full_name: str = "") -> CustomUser:
        """
        [Purpose] Create a respondent account.
        [Args] email: normalised to lower case; password: checked by ``AUTH_PASSWORD_VALIDATORS``.
        [Returns] The new CustomUser; ValidationError for a malformed or already
        registered e-mail and for rejected passwords.
        """

        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("E-mail and password are required.")
        validate_email(email)
        if CustomUser.objects.filter(email=email).exists():
            raise ValidationError("An account with this e-mail already exists.")
        validate_password(password, user=CustomUser(email=email, full_name=full_name))

        user = CustomUser.objects.create_user(
            email=email,
            password=password,
            full_name=(full_name or "").strip(),
        )
        logger.info("Registered account %s", user.pk)
        return user

    def login(self, request, email: str, password: str) -> Tuple[bool, Optional[CustomUser] | str]:
        """
        [Purpose] E-mail + password login through the Django auth backend.
        [Usage] Login view; the session is opened on success.
        [Returns] ``(True, user)`` or ``(False, message)``.
        """

        if not email or not password:
            return False, "Please enter your e-mail and password."
        user = authenticate(request, username=email.strip().lower(), password=password)
        if not user:
            return False, "Invalid e-mail or password."
        login(request, user)
        return True, user

    def logout(self, request) -> None:
        """[Purpose] Close the session of ``request.user``."""
        logout(request)

    def give_consent(self, user: CustomUser) -> CustomUser:
        """[Purpose] Record acceptance of the data-processing notice; idempotent. [Returns] The user."""

        if not user.has_given_consent:
            user.has_given_consent = True
            user.save(update_fields=["has_given_consent", "updated_at"])
        return user
