"""Measure feedback tests."""

from django.core.exceptions import ValidationError
from django.test import TestCase

from evaluations.models import FeedbackMeasure
from evaluations.models.choices import PlanStatus
from evaluations.services.feedback import get_feedback, save_feedback

from .helpers import make_evaluation, make_facility, make_questionnaire, make_user

MEASURES = [
    {"measure": "Quarantine arrivals for 21 days", "category": "Movements"},
    {"measure": "Keep a visitor log", "category": "Visitors"},
]


class FeedbackTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.evaluation = make_evaluation(
            self.user,
            make_facility(self.user),
            make_questionnaire(),
            plan_status=PlanStatus.PUBLISHED,
            plan_content="# Plan",
            actionable_measures=MEASURES,
        )

    def test_feedback_defaults_to_empty(self):
        self.assertEqual(
            get_feedback(self.evaluation),
            [
                {"measure": m["measure"], "category": m["category"], "user_feedback": None, "user_comment": None}
                for m in MEASURES
            ],
        )

    def test_save_upserts_per_measure(self):
        save_feedback(
            self.evaluation,
            self.user,
            [{"measure": "Keep a visitor log", "user_feedback": "easy", "user_comment": ""}],
        )
        items = save_feedback(
            self.evaluation,
            self.user,
            [{"measure": "Keep a visitor log", "user_feedback": "challenging", "user_comment": "Staff turnover"}],
        )

        self.assertEqual(FeedbackMeasure.objects.count(), 1)
        row = FeedbackMeasure.objects.get()
        self.assertEqual(row.category, "Visitors")
        self.assertEqual(items[1]["user_feedback"], "challenging")
        self.assertEqual(items[1]["user_comment"], "Staff turnover")
        self.assertIsNone(items[0]["user_feedback"])

    def test_invalid_feedback_is_rejected(self):
        for items in (
            [{"measure": "Unknown measure", "user_feedback": "easy"}],
            [{"measure": "Keep a visitor log", "user_feedback": "maybe"}],
            ["Keep a visitor log"],
            {"measure": "Keep a visitor log"},
        ):
            with self.subTest(items=items), self.assertRaises(ValidationError):
                save_feedback(self.evaluation, self.user, items)

    def test_feedback_requires_published_plan(self):
        self.evaluation.plan_status = PlanStatus.DRAFT
        self.evaluation.save(update_fields=["plan_status"])
        with self.assertRaises(ValidationError):
            save_feedback(self.evaluation, self.user, [{"measure": "Keep a visitor log", "user_feedback": "easy"}])
