"""Account administration used by the admin user-management screen."""

from __future__ import annotations

from typing import Any, Dict, List

from django.core.exceptions import ValidationError
from django.db.models import Count, Max

from users import choices
from users.models import CustomUser


class UserService:
    """Listing and role management for administrators."""

    @staticmethod
    def list_users_with_stats() -> List[Dict[str, Any]]:
        """
        [Purpose] Every account, newest first, with facility and evaluation counts.
        [Usage] Admin user list.
        [Returns] list of dicts::

            [{"id": 3, "email": "ana@example.pt", "full_name": "Ana",
              "role": 1, "role_display": "User", "has_given_consent": True,
              "created_at": "2025-03-02T10:00:00+00:00",
              "facility_count": 2, "evaluation_count": 5,
              "last_evaluation_at": "2025-04-01T09:12:00+00:00"}]
        """
        users = CustomUser.objects.annotate(
            facility_count=Count("facilities", distinct=True),
            evaluation_count=Count("evaluations", distinct=True),
            last_evaluation_at=Max("evaluations__created_at"),
        ).order_by("-created_at")

        return [
            {
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "role": user.role,
                "role_display": user.get_role_display(),
                "is_active": user.is_active,
                "has_given_consent": user.has_given_consent,
                "created_at": user.created_at.isoformat(),
                "facility_count": user.facility_count,
                "evaluation_count": user.evaluation_count,
                "last_evaluation_at": (
                    user.last_evaluation_at.isoformat() if user.last_evaluation_at else None
                ),
            }
            for user in users
        ]

    @staticmethod
    def change_role(acting_user: CustomUser, user_id: int, role: int) -> CustomUser:
        """
        [Purpose] Promote or demote an account.
        [Args] acting_user: the administrator making the change; role: a ``UserRole`` value.
        [Returns] The updated CustomUser. ValidationError for an unknown role or when
        an administrator tries to demote themselves; CustomUser.DoesNotExist for a bad id.
        """
        try:
            role = int(role)
        except (TypeError, ValueError) as exc:
            raise ValidationError("Invalid role.") from exc
        if role not in choices.UserRole.values:
            raise ValidationError("Invalid role.")

        user = CustomUser.objects.get(pk=user_id)
        if user.pk == acting_user.pk and role != choices.UserRole.ADMIN:
            raise ValidationError("You cannot remove your own administrator role.")

        user.role = role
        user.save(update_fields=["role", "updated_at"])
        return user
