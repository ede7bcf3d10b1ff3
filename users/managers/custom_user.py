from django.contrib.auth.base_user import BaseUserManager

from users import choices


class CustomUserManager(BaseUserManager):
    """
    Centralises account creation: e-mail normalisation, password handling and
    field validation.

    Usage: ``CustomUser.objects.create_user(email="ana@example.pt", password="...")``.
    """

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        """
        Low-level creation shared by ``create_user`` / ``create_superuser``.
        Do not call directly.
        """

        if not email:
            raise ValueError("An e-mail address is required.")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_user(self, email=None, password=None, **extra_fields):
        """Create a regular respondent account (role USER, no back-office access)."""

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", choices.UserRole.USER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, **extra_fields):
        """
        Create a platform administrator. Used by ``python manage.py createsuperuser``.
        """

        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", choices.UserRole.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)
