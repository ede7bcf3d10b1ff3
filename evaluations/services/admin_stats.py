"""Read models for the administration area."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, OuterRef, Subquery

from core.service.risk_levels import dashboard_risk_level
from core.service.scoring import fraction_to_percentage
from evaluations.models import Evaluation, Facility

logger = logging.getLogger(__name__)


def get_dashboard_stats() -> Dict[str, Any]:
    """[Purpose] Headline counters of the admin dashboard. [Returns] totals plus the average score as fraction and percentage."""
    average = Evaluation.objects.aggregate(avg=Avg("total_score"))["avg"] or 0.0
    return {
        "total_users": get_user_model().objects.count(),
        "total_facilities": Facility.objects.count(),
        "total_evaluations": Evaluation.objects.count(),
        "average_score": average,
        "average_percentage": fraction_to_percentage(average),
    }


def list_facilities_with_stats() -> List[Dict[str, Any]]:
    """
    [Purpose] Admin facility table.
    [Returns] list of dicts with owner, evaluation count and the latest score with
    its dashboard risk level (3 levels).
    """
    latest = Evaluation.objects.filter(facility=OuterRef("pk")).order_by("-created_at", "-id")
    facilities = (
        Facility.objects.select_related("user")
        .annotate(
            evaluation_count=Count("evaluations"),
            latest_score=Subquery(latest.values("total_score")[:1]),
            latest_evaluation_at=Subquery(latest.values("created_at")[:1]),
        )
        .order_by("-created_at")
    )

    rows = []
    for facility in facilities:
        latest_score: Optional[float] = facility.latest_score
        rows.append(
            {
                "id": facility.id,
                "name": facility.name,
                "region": facility.region,
                "facility_type": facility.facility_type,
                "is_active": facility.is_active,
                "owner_email": facility.user.email,
                "created_at": facility.created_at.isoformat(),
                "evaluation_count": facility.evaluation_count,
                "latest_score": latest_score,
                "latest_percentage": fraction_to_percentage(latest_score)
                if latest_score is not None
                else None,
                "latest_risk": dashboard_risk_level(latest_score).as_dict()
                if latest_score is not None
                else None,
                "latest_evaluation_at": facility.latest_evaluation_at.isoformat()
                if facility.latest_evaluation_at
                else None,
            }
        )
    return rows


def toggle_facility(facility_id: int) -> Facility:
    """[Purpose] Flip ``is_active``; inactive facilities disappear from the respondent side. [Returns] The Facility."""
    facility = Facility.objects.get(pk=facility_id)
    facility.is_active = not facility.is_active
    facility.save(update_fields=["is_active", "updated_at"])
    logger.info("Facility %s active=%s", facility.pk, facility.is_active)
    return facility


def list_assessments() -> List[Dict[str, Any]]:
    """[Purpose] Admin assessments table. [Returns] every evaluation, newest first."""
    evaluations = Evaluation.objects.select_related("facility", "user", "questionnaire").order_by(
        "-created_at", "-id"
    )
    return [
        {
            "id": ev.id,
            "facility": ev.facility.name,
            "user_email": ev.user.email,
            "questionnaire": str(ev.questionnaire),
            "created_at": ev.created_at.isoformat(),
            "total_score": ev.total_score,
            "percentage": fraction_to_percentage(ev.total_score),
            "risk": dashboard_risk_level(ev.total_score).as_dict(),
            "plan_status": ev.plan_status,
        }
        for ev in evaluations
    ]
