"""CSV export tests."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from django.test import TestCase, override_settings

from core.models import Section
from evaluations.models import Evaluation, EvaluationAnswer
from evaluations.services.export import (
    build_full_csv,
    build_scores_csv,
    export_filename,
    export_queryset,
)

from .helpers import make_evaluation, make_facility, make_questionnaire, make_user


@override_settings(TIME_ZONE="Europe/Lisbon")
class ExportTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.facility = make_facility(self.user)
        self.data = make_questionnaire()
        self.evaluation = make_evaluation(self.user, self.facility, self.data, total=0.66666)
        # Fixed timestamp: 14:05 UTC is 15:05 in Lisbon summer time.
        Evaluation.objects.filter(pk=self.evaluation.pk).update(
            created_at=datetime(2025, 6, 1, 14, 5, tzinfo=ZoneInfo("UTC"))
        )

    def test_scores_csv(self):
        content = build_scores_csv(export_queryset())
        lines = content.splitlines()

        self.assertTrue(content.startswith("\ufeff"))
        self.assertEqual(
            lines[0], "\ufeffFacility;User;Date;Total score (%);Movements (%);Visitors (%)"
        )
        self.assertEqual(lines[1], "Quinta do Vale;owner@example.pt;2025-06-01 15:05;66.7;50.0;100.0")

    def test_missing_section_is_na(self):
        Section.objects.create(questionnaire=self.data["questionnaire"], name="Transport", order_index=2)
        lines = build_scores_csv(export_queryset()).splitlines()
        self.assertTrue(lines[0].endswith(";Transport (%)"))
        self.assertTrue(lines[1].endswith(";N/A"))

    def test_full_csv(self):
        quarantine, measures, notes = self.data["questions"]
        opts = self.data["options"]
        EvaluationAnswer.objects.create(
            evaluation=self.evaluation,
            question=measures,
            selected_options=[opts["free_access"].id, opts["log"].id],
        )
        EvaluationAnswer.objects.create(evaluation=self.evaluation, question=notes, text_answer="Shared arena")

        lines = build_full_csv(export_queryset()).splitlines()

        self.assertEqual(lines[0], "\ufeffFacility;User;Date;Section;Question;Answer")
        prefix = "Quinta do Vale;owner@example.pt;2025-06-01 15:05"
        self.assertEqual(
            lines[1:],
            [
                f"{prefix};Movements;Quarantine new arrivals?;No answer",
                f"{prefix};Visitors;Visitor measures;Visitor log, Free access",
                f"{prefix};Visitors;Other remarks;Shared arena",
            ],
        )

    def test_empty_export_has_header_only(self):
        Evaluation.objects.all().delete()
        self.assertEqual(
            build_scores_csv(export_queryset()),
            "\ufeffFacility;User;Date;Total score (%)\n",
        )

    def test_filenames(self):
        self.assertEqual(export_filename("scores", date(2025, 6, 1)), "evaluations_scores_2025-06-01.csv")
        self.assertEqual(export_filename("full", date(2025, 6, 1)), "evaluations_full_2025-06-01.csv")
