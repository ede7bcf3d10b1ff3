"""Administration read models and the respondent dashboard."""

from django.core.exceptions import ValidationError
from django.test import TestCase

from evaluations.services import FacilityService
from evaluations.services.admin_stats import (
    get_dashboard_stats,
    list_assessments,
    list_facilities_with_stats,
    toggle_facility,
)

from .helpers import make_admin, make_evaluation, make_facility, make_questionnaire, make_user


class AdminStatsTest(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.user = make_user()
        self.facility = make_facility(self.user)
        self.data = make_questionnaire()

    def test_empty_stats(self):
        stats = get_dashboard_stats()
        self.assertEqual(stats["total_users"], 2)
        self.assertEqual(stats["total_facilities"], 1)
        self.assertEqual(stats["total_evaluations"], 0)
        self.assertEqual(stats["average_percentage"], 0.0)

    def test_average_score(self):
        make_evaluation(self.user, self.facility, self.data, total=0.2)
        make_evaluation(self.user, self.facility, self.data, total=0.6)
        stats = get_dashboard_stats()
        self.assertEqual(stats["total_evaluations"], 2)
        self.assertAlmostEqual(stats["average_score"], 0.4)

    def test_facilities_with_latest_score(self):
        make_facility(self.user, name="Empty yard")
        make_evaluation(self.user, self.facility, self.data, total=0.2)
        latest = make_evaluation(self.user, self.facility, self.data, total=0.7)

        rows = {row["name"]: row for row in list_facilities_with_stats()}

        self.assertEqual(rows["Quinta do Vale"]["evaluation_count"], 2)
        self.assertEqual(rows["Quinta do Vale"]["latest_score"], latest.total_score)
        self.assertEqual(rows["Quinta do Vale"]["latest_risk"]["label"], "High")
        self.assertEqual(rows["Quinta do Vale"]["owner_email"], "owner@example.pt")
        self.assertIsNone(rows["Empty yard"]["latest_risk"])

    def test_toggle_facility(self):
        self.assertFalse(toggle_facility(self.facility.id).is_active)
        self.assertTrue(toggle_facility(self.facility.id).is_active)

    def test_assessment_list_uses_three_level_risk(self):
        make_evaluation(self.user, self.facility, self.data, total=0.3)
        rows = list_assessments()
        self.assertEqual(rows[0]["risk"]["label"], "Low")
        self.assertEqual(rows[0]["percentage"], 30.0)
        self.assertEqual(rows[0]["user_email"], "owner@example.pt")
        self.assertEqual(rows[0]["plan_status"], "not_generated")


class FacilityServiceTest(TestCase):
    def setUp(self):
        self.user = make_user()

    def test_create_requires_name(self):
        with self.assertRaises(ValidationError):
            FacilityService.create_facility(self.user, " ")

    def test_dashboard_lists_own_active_facilities(self):
        data = make_questionnaire()
        facility = FacilityService.create_facility(self.user, "Quinta do Vale", region="Minho")
        hidden = FacilityService.create_facility(self.user, "Closed yard")
        hidden.is_active = False
        hidden.save()
        make_facility(make_user("other@example.pt"), name="Not mine")
        make_evaluation(self.user, facility, data, total=0.45)

        dashboard = FacilityService.build_dashboard(self.user)

        self.assertTrue(dashboard["has_active_questionnaire"])
        self.assertEqual([f["name"] for f in dashboard["facilities"]], ["Quinta do Vale"])
        evaluation = dashboard["facilities"][0]["evaluations"][0]
        self.assertEqual(evaluation["percentage"], 45.0)
        self.assertEqual(evaluation["risk"]["label"], "Medium")


class QuestionnaireDeletionTest(TestCase):
    def test_questionnaire_with_evaluations_cannot_be_deleted(self):
        from core.models import Questionnaire
        from core.service.questionnaire import QuestionnaireService

        user = make_user()
        data = make_questionnaire()
        make_evaluation(user, make_facility(user), data)

        with self.assertRaises(ValidationError):
            QuestionnaireService.delete_questionnaire(data["questionnaire"].id)
        self.assertTrue(Questionnaire.objects.filter(pk=data["questionnaire"].id).exists())
