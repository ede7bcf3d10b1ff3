"""
Role-based view guards.

Built on Django's ``user_passes_test``: anonymous users are redirected to the
login page, authenticated users with the wrong role get a 403.
"""

from typing import Callable, Iterable

from django.conf import settings
from django.contrib.auth.decorators import user_passes_test
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest, HttpResponse

from users import choices

ViewFunc = Callable[[HttpRequest], HttpResponse]


LOGIN_URL = getattr(settings, "LOGIN_URL", "login")
"""Where unauthenticated users are redirected."""


def _user_role_guard(user, allowed_roles: Iterable[int]) -> bool:
    """
    ``user_passes_test`` predicate.

    Anonymous -> False (redirect to login); inactive or wrong role ->
    PermissionDenied; otherwise True.
    """

    if not getattr(user, "is_authenticated", False):
        return False

    if not getattr(user, "is_active", False):
        raise PermissionDenied("Account is disabled.")

    if getattr(user, "role", None) not in allowed_roles:
        raise PermissionDenied("You do not have access to this resource.")

    return True


def _build_role_decorator(*roles: int) -> Callable[[ViewFunc], ViewFunc]:
    """Build a decorator admitting only the given ``UserRole`` values."""

    def decorator(view_func: ViewFunc) -> ViewFunc:
        return user_passes_test(
            lambda user: _user_role_guard(user, roles),
            login_url=LOGIN_URL,
        )(view_func)

    return decorator


def check_user(view_func: ViewFunc) -> ViewFunc:
    """Any signed-in, active account (respondents and administrators)."""

    return _build_role_decorator(choices.UserRole.USER, choices.UserRole.ADMIN)(view_func)


def check_admin(view_func: ViewFunc) -> ViewFunc:
    """Administrators only."""

    return _build_role_decorator(choices.UserRole.ADMIN)(view_func)


__all__ = [
    "check_user",
    "check_admin",
]
