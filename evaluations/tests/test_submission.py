"""EvaluationSubmissionService tests: persistence, degraded answer saving, round trip."""

from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase

from evaluations.models import Evaluation, EvaluationAnswer, Facility
from evaluations.services.report import build_report
from evaluations.services.submission import (
    EvaluationSubmissionService,
    NoActiveQuestionnaireError,
)

from .helpers import make_facility, make_questionnaire, make_user, sample_answers


class EvaluationSubmitTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.facility = make_facility(self.user)
        self.data = make_questionnaire()

    def test_submit_persists_scores_and_answers(self):
        with patch("evaluations.services.submission.schedule_plan_generation") as schedule:
            with self.captureOnCommitCallbacks(execute=True):
                result = EvaluationSubmissionService.submit(
                    self.user, self.facility.id, sample_answers(self.data)
                )

        evaluation = result.evaluation
        movements, visitors = self.data["sections"]
        self.assertTrue(result.answers_saved)
        self.assertAlmostEqual(evaluation.total_score, 0.8)
        self.assertEqual(
            evaluation.section_scores,
            [{"section_id": movements.id, "score": 0.5}, {"section_id": visitors.id, "score": 1.0}],
        )
        self.assertEqual(evaluation.answers.count(), 3)
        notes_answer = evaluation.answers.get(question=self.data["questions"][2])
        self.assertIsNone(notes_answer.selected_options)
        self.assertEqual(notes_answer.text_answer, "Shared arena with neighbours")
        schedule.assert_called_once_with(evaluation.id)

    def test_no_active_questionnaire(self):
        self.data["questionnaire"].is_active = False
        self.data["questionnaire"].save()
        with self.assertRaises(NoActiveQuestionnaireError):
            EvaluationSubmissionService.submit(self.user, self.facility.id, [])
        with self.assertRaises(NoActiveQuestionnaireError):
            EvaluationSubmissionService.get_form()
        self.assertFalse(Evaluation.objects.exists())

    def test_facility_of_another_user_is_not_found(self):
        other = make_facility(make_user("other@example.pt"), name="Other yard")
        with self.assertRaises(Facility.DoesNotExist):
            EvaluationSubmissionService.submit(self.user, other.id, sample_answers(self.data))

    def test_answers_for_unknown_options_are_rejected(self):
        quarantine = self.data["questions"][0]
        foreign_option = self.data["options"]["log"]
        with self.assertRaises(ValidationError):
            EvaluationSubmissionService.submit(
                self.user,
                self.facility.id,
                [{"question_id": quarantine.id, "selected_option_ids": [foreign_option.id]}],
            )
        self.assertFalse(Evaluation.objects.exists())

    def test_answer_failure_keeps_evaluation(self):
        with patch.object(
            EvaluationAnswer.objects, "bulk_create", side_effect=DatabaseError("disk full")
        ), patch("evaluations.services.submission.schedule_plan_generation"):
            with self.assertLogs("evaluations.services.submission", level="ERROR") as logs:
                result = EvaluationSubmissionService.submit(
                    self.user, self.facility.id, sample_answers(self.data)
                )

        self.assertFalse(result.answers_saved)
        self.assertTrue(Evaluation.objects.filter(pk=result.evaluation.pk).exists())
        self.assertFalse(EvaluationAnswer.objects.exists())
        self.assertIn("failed for evaluation", logs.output[0])

    def test_enqueue_failure_does_not_fail_submission(self):
        with patch("evaluations.tasks.notify_plan_generation_task") as task:
            task.delay.side_effect = ConnectionError("broker down")
            with self.assertLogs("evaluations.services.plan_generation", level="ERROR"):
                with self.captureOnCommitCallbacks(execute=True):
                    result = EvaluationSubmissionService.submit(
                        self.user, self.facility.id, sample_answers(self.data)
                    )
        self.assertTrue(Evaluation.objects.filter(pk=result.evaluation.pk).exists())

    def test_live_and_reloaded_percentages_match(self):
        answers = sample_answers(self.data)
        live = EvaluationSubmissionService.score(answers)
        with patch("evaluations.services.submission.schedule_plan_generation"):
            result = EvaluationSubmissionService.submit(self.user, self.facility.id, answers)

        evaluation = Evaluation.objects.get(pk=result.evaluation.pk)
        report = build_report(evaluation)

        self.assertEqual(report["total"]["percentage"], live.total.percentage)
        self.assertEqual(
            [row["percentage"] for row in report["sections"]],
            [s.percentage for s in live.sections],
        )

    def test_round_trip_with_non_terminating_fraction(self):
        quarantine, measures, _notes = self.data["questions"]
        opts = self.data["options"]
        # Visitors section ends at 2 of 3.
        answers = [
            {"question_id": quarantine.id, "selected_option_ids": [opts["always"].id]},
            {
                "question_id": measures.id,
                "selected_option_ids": [opts["free_access"].id, opts["boots"].id],
            },
        ]
        live = EvaluationSubmissionService.score(answers)
        with patch("evaluations.services.submission.schedule_plan_generation"):
            result = EvaluationSubmissionService.submit(self.user, self.facility.id, answers)
        report = build_report(Evaluation.objects.get(pk=result.evaluation.pk))

        self.assertEqual(live.sections[1].percentage, 66.6667)
        self.assertEqual(report["sections"][1]["percentage"], live.sections[1].percentage)
        self.assertEqual(report["total"]["percentage"], live.total.percentage)


class PrefillTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.facility = make_facility(self.user)
        self.data = make_questionnaire()

    def test_no_previous_evaluation(self):
        self.assertEqual(
            EvaluationSubmissionService.get_prefill_answers(self.user, self.facility.id),
            {"evaluation_id": None, "answers": []},
        )

    def test_prefill_returns_latest_answers(self):
        with patch("evaluations.services.submission.schedule_plan_generation"):
            EvaluationSubmissionService.submit(self.user, self.facility.id, sample_answers(self.data))
            latest = EvaluationSubmissionService.submit(
                self.user,
                self.facility.id,
                [
                    {
                        "question_id": self.data["questions"][0].id,
                        "selected_option_ids": [self.data["options"]["always"].id],
                    }
                ],
            ).evaluation

        prefill = EvaluationSubmissionService.get_prefill_answers(self.user, self.facility.id)

        self.assertEqual(prefill["evaluation_id"], latest.id)
        self.assertEqual(
            prefill["answers"],
            [
                {
                    "question_id": self.data["questions"][0].id,
                    "selected_option_ids": [self.data["options"]["always"].id],
                    "text_answer": None,
                }
            ],
        )

    def test_prefill_skips_deleted_options(self):
        with patch("evaluations.services.submission.schedule_plan_generation"):
            EvaluationSubmissionService.submit(self.user, self.facility.id, sample_answers(self.data))
        self.data["options"]["free_access"].delete()

        prefill = EvaluationSubmissionService.get_prefill_answers(self.user, self.facility.id)
        measures = [a for a in prefill["answers"] if a["question_id"] == self.data["questions"][1].id]
        self.assertEqual(measures[0]["selected_option_ids"], [self.data["options"]["log"].id])
