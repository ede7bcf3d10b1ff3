"""Report assembly and visibility tests."""

from django.test import TestCase

from core.models import Section
from evaluations.models import EvaluationAnswer
from evaluations.models.choices import PlanStatus
from evaluations.services.report import build_report, can_view

from .helpers import make_admin, make_evaluation, make_facility, make_questionnaire, make_user


class BuildReportTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.data = make_questionnaire()
        self.evaluation = make_evaluation(self.user, make_facility(self.user), self.data, total=0.8)

    def test_scores_and_risk(self):
        report = build_report(self.evaluation)

        self.assertEqual(report["total"]["percentage"], 80.0)
        self.assertEqual(report["total"]["display"], "80.0%")
        self.assertEqual(report["total"]["risk"]["label"], "Very High")
        self.assertIn("Urgent", report["total"]["message"])
        self.assertEqual(
            [(row["name"], row["percentage"]) for row in report["sections"]],
            [("Movements", 50.0), ("Visitors", 100.0)],
        )
        self.assertEqual(report["facility"]["name"], "Quinta do Vale")

    def test_section_added_later_renders_na(self):
        Section.objects.create(questionnaire=self.data["questionnaire"], name="Transport", order_index=5)
        row = build_report(self.evaluation)["sections"][-1]
        self.assertEqual(row["name"], "Transport")
        self.assertIsNone(row["percentage"])
        self.assertEqual(row["display"], "N/A")
        self.assertEqual(row["risk"]["code"], "low")

    def test_deleted_section_is_skipped(self):
        self.data["sections"][0].delete()
        report = build_report(self.evaluation)
        self.assertEqual([row["name"] for row in report["sections"]], ["Visitors"])

    def test_recommendations_from_stored_answers(self):
        quarantine = self.data["questions"][0]
        EvaluationAnswer.objects.create(
            evaluation=self.evaluation,
            question=quarantine,
            selected_options=[self.data["options"]["never"].id],
        )
        recommendations = build_report(self.evaluation)["recommendations"]
        self.assertEqual(len(recommendations), 1)
        self.assertEqual(recommendations[0]["recommendation"], "Consider implementing: Always")
        self.assertEqual(recommendations[0]["current_answer"], "Never")

    def test_answers_to_deleted_questions_are_ignored(self):
        quarantine = self.data["questions"][0]
        EvaluationAnswer.objects.create(
            evaluation=self.evaluation,
            question=quarantine,
            selected_options=[self.data["options"]["never"].id],
        )
        quarantine.delete()
        self.assertEqual(build_report(self.evaluation)["recommendations"], [])

    def test_plan_hidden_until_published(self):
        self.evaluation.plan_status = PlanStatus.DRAFT
        self.evaluation.plan_content = "# Draft"
        self.evaluation.save()

        self.assertEqual(build_report(self.evaluation)["plan"]["html"], "")
        self.assertIn("<h1>Draft</h1>", build_report(self.evaluation, include_draft_plan=True)["plan"]["html"])


class CanViewTest(TestCase):
    def test_owner_admin_and_stranger(self):
        owner = make_user()
        evaluation = make_evaluation(owner, make_facility(owner), make_questionnaire())

        self.assertTrue(can_view(owner, evaluation))
        self.assertTrue(can_view(make_admin(), evaluation))
        self.assertFalse(can_view(make_user("stranger@example.pt"), evaluation))
