"""Facilities and the respondent dashboard."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.core.exceptions import ValidationError
from django.db.models import Prefetch

from core.service.questionnaire import QuestionnaireService
from core.service.risk_levels import dashboard_risk_level
from core.service.scoring import fraction_to_percentage
from evaluations.models import Evaluation, Facility

logger = logging.getLogger(__name__)


class FacilityService:

    @staticmethod
    def create_facility(user, name: str, region: str = "", facility_type: str = "") -> Facility:
        """
        [Purpose] Register a facility for the respondent.
        [Args] name: required; region and facility_type: optional free text.
        [Returns] The saved Facility; ValidationError for a blank or too long field.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Facility name is required.")
        facility = Facility(
            user=user,
            name=name,
            region=(region or "").strip(),
            facility_type=(facility_type or "").strip(),
        )
        facility.full_clean()
        facility.save()
        logger.info("User %s created facility %s", user.pk, facility.pk)
        return facility

    @staticmethod
    def get_user_facility(user, facility_id) -> Facility:
        """
        [Purpose] Active facility owned by ``user``.
        [Usage] Every respondent endpoint that takes a facility id.
        [Returns] The Facility. ``Facility.DoesNotExist`` for unknown ids and for
        facilities of other users, so callers answer 404 in both cases.
        """
        return Facility.objects.get(pk=facility_id, user=user, is_active=True)

    @staticmethod
    def build_dashboard(user) -> Dict[str, Any]:
        """
        [Purpose] Respondent home page data.
        [Usage] Dashboard endpoint.
        [Returns]::

            {"has_active_questionnaire": True,
             "has_given_consent": True,
             "facilities": [
                {"id": 1, "name": "...", "region": "...", "facility_type": "...",
                 "evaluations": [
                    {"id": 9, "created_at": "...", "total_score": 0.42,
                     "percentage": 42.0, "risk": {...}, "plan_status": "draft"}]}]}
        """
        evaluations_qs = Evaluation.objects.order_by("-created_at", "-id")
        facilities = (
            Facility.objects.filter(user=user, is_active=True)
            .order_by("-created_at")
            .prefetch_related(Prefetch("evaluations", queryset=evaluations_qs))
        )

        facilities_data: List[Dict[str, Any]] = []
        for facility in facilities:
            facilities_data.append(
                {
                    "id": facility.id,
                    "name": facility.name,
                    "region": facility.region,
                    "facility_type": facility.facility_type,
                    "created_at": facility.created_at.isoformat(),
                    "evaluations": [
                        {
                            "id": ev.id,
                            "created_at": ev.created_at.isoformat(),
                            "total_score": ev.total_score,
                            "percentage": fraction_to_percentage(ev.total_score),
                            "risk": dashboard_risk_level(ev.total_score).as_dict(),
                            "plan_status": ev.plan_status,
                        }
                        for ev in facility.evaluations.all()
                    ],
                }
            )

        return {
            "has_active_questionnaire": QuestionnaireService.get_active_questionnaire() is not None,
            "has_given_consent": user.has_given_consent,
            "facilities": facilities_data,
        }
