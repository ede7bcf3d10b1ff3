import json
from unittest.mock import patch

from django.test import Client, TestCase, override_settings
from django.urls import reverse

from core.models import Question, Questionnaire, Section
from evaluations.models.choices import PlanStatus
from evaluations.tests.helpers import (
    make_admin,
    make_evaluation,
    make_facility,
    make_questionnaire,
    make_user,
)
from users import choices


class AdminApiTestCase(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.client = Client()
        self.client.force_login(self.admin)

    def post_json(self, url, payload=None):
        return self.client.post(url, json.dumps(payload or {}), content_type="application/json")


class AccessTests(AdminApiTestCase):
    def test_regular_user_is_forbidden(self):
        client = Client()
        client.force_login(make_user())
        self.assertEqual(client.get(reverse("web_admin:stats")).status_code, 403)

    def test_anonymous_is_redirected(self):
        self.assertEqual(Client().get(reverse("web_admin:stats")).status_code, 302)

    def test_stats(self):
        response = self.client.get(reverse("web_admin:stats"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["stats"]["total_users"], 1)


class UserAndFacilityTests(AdminApiTestCase):
    def test_user_list(self):
        owner = make_user()
        make_facility(owner)
        users = {u["email"]: u for u in self.client.get(reverse("web_admin:user_list")).json()["users"]}
        self.assertEqual(users["owner@example.pt"]["facility_count"], 1)
        self.assertEqual(users["admin@example.pt"]["role"], choices.UserRole.ADMIN)

    def test_promote_user(self):
        owner = make_user()
        response = self.post_json(reverse("web_admin:user_role", args=[owner.id]), {"role": 2})
        self.assertEqual(response.status_code, 200)
        owner.refresh_from_db()
        self.assertTrue(owner.is_admin)

    def test_cannot_demote_self(self):
        response = self.post_json(reverse("web_admin:user_role", args=[self.admin.id]), {"role": 1})
        self.assertEqual(response.status_code, 400)

    def test_facility_toggle(self):
        facility = make_facility(make_user())
        response = self.post_json(reverse("web_admin:facility_toggle", args=[facility.id]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["facility"]["is_active"])

        rows = self.client.get(reverse("web_admin:facility_list")).json()["facilities"]
        self.assertFalse(rows[0]["is_active"])


class QuestionnaireBuilderTests(AdminApiTestCase):
    def test_create_and_activate(self):
        existing = make_questionnaire()["questionnaire"]

        response = self.post_json(reverse("web_admin:questionnaire_list"), {"name": "Biosecurity 2026"})
        self.assertEqual(response.status_code, 201)
        new_id = response.json()["questionnaire"]["id"]
        self.assertFalse(response.json()["questionnaire"]["is_active"])

        response = self.post_json(
            reverse("web_admin:questionnaire_toggle", args=[new_id]), {"active": True}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(Questionnaire.objects.filter(is_active=True)), [Questionnaire.objects.get(pk=new_id)])
        existing.refresh_from_db()
        self.assertFalse(existing.is_active)

    def test_list(self):
        make_questionnaire()
        rows = self.client.get(reverse("web_admin:questionnaire_list")).json()["questionnaires"]
        self.assertEqual(rows[0]["section_count"], 2)
        self.assertEqual(rows[0]["question_count"], 3)

    def test_delete_refused_with_evaluations(self):
        owner = make_user()
        data = make_questionnaire()
        make_evaluation(owner, make_facility(owner), data)
        response = self.client.delete(
            reverse("web_admin:questionnaire_detail", args=[data["questionnaire"].id])
        )
        self.assertEqual(response.status_code, 400)
        self.assertTrue(Questionnaire.objects.filter(pk=data["questionnaire"].id).exists())

    def test_delete_unused(self):
        questionnaire = Questionnaire.objects.create(name="Draft")
        response = self.client.delete(reverse("web_admin:questionnaire_detail", args=[questionnaire.id]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Questionnaire.objects.filter(pk=questionnaire.id).exists())

    def test_tree_missing(self):
        response = self.client.get(reverse("web_admin:questionnaire_detail", args=[999999]))
        self.assertEqual(response.status_code, 404)

    def test_sections_and_questions(self):
        questionnaire = Questionnaire.objects.create(name="Draft")

        response = self.post_json(
            reverse("web_admin:section_create", args=[questionnaire.id]), {"name": "Feed"}
        )
        self.assertEqual(response.status_code, 201)
        section_id = response.json()["section"]["id"]

        response = self.post_json(reverse("web_admin:section_detail", args=[section_id]), {"name": "Feed & water"})
        self.assertEqual(response.json()["section"]["name"], "Feed & water")

        response = self.post_json(
            reverse("web_admin:question_save", args=[section_id]),
            {
                "text": "Shared water troughs?",
                "q_type": "SINGLE",
                "options": [{"text": "No", "score": 0}, {"text": "Yes", "score": "2.5"}],
            },
        )
        self.assertEqual(response.status_code, 200)
        question = response.json()["question"]
        self.assertEqual([o["score"] for o in question["options"]], [0.0, 2.5])

        response = self.post_json(
            reverse("web_admin:question_save", args=[section_id]),
            {"question_id": question["id"], "text": "Notes", "q_type": "TEXT", "options": []},
        )
        self.assertEqual(response.json()["question"]["options"], [])

        tree = self.client.get(reverse("web_admin:questionnaire_detail", args=[questionnaire.id])).json()
        self.assertEqual(tree["questionnaire"]["sections"][0]["questions"][0]["text"], "Notes")

        self.assertEqual(
            self.client.delete(reverse("web_admin:question_delete", args=[question["id"]])).status_code, 200
        )
        self.assertFalse(Question.objects.filter(pk=question["id"]).exists())
        self.assertEqual(
            self.client.delete(reverse("web_admin:section_detail", args=[section_id])).status_code, 200
        )
        self.assertFalse(Section.objects.filter(pk=section_id).exists())

    def test_choice_question_needs_options(self):
        section = Section.objects.create(questionnaire=Questionnaire.objects.create(name="Draft"), name="Feed")
        response = self.post_json(
            reverse("web_admin:question_save", args=[section.id]),
            {"text": "Shared water troughs?", "q_type": "MULTIPLE", "options": []},
        )
        self.assertEqual(response.status_code, 400)


class AssessmentTests(AdminApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner = make_user()
        self.data = make_questionnaire()
        self.evaluation = make_evaluation(
            self.owner, make_facility(self.owner), self.data, total=0.55, plan_status=PlanStatus.GENERATING
        )

    def test_list(self):
        rows = self.client.get(reverse("web_admin:assessment_list")).json()["assessments"]
        self.assertEqual(rows[0]["id"], self.evaluation.id)
        self.assertEqual(rows[0]["risk"]["label"], "Medium")

    def test_export_scores(self):
        response = self.client.get(reverse("web_admin:export_scores"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "text/csv; charset=utf-8")
        self.assertIn('filename="evaluations_scores_', response["Content-Disposition"])
        content = response.content.decode("utf-8")
        self.assertTrue(content.startswith("\ufeffFacility;User;Date;Total score (%);Movements (%);Visitors (%)"))
        self.assertIn(";55.0;50.0;100.0", content)

    def test_export_full(self):
        response = self.client.get(reverse("web_admin:export_full"))
        self.assertIn('filename="evaluations_full_', response["Content-Disposition"])
        lines = response.content.decode("utf-8").splitlines()
        self.assertEqual(len(lines), 1 + 3)
        self.assertTrue(lines[1].endswith(";Movements;Quarantine new arrivals?;No answer"))

    def test_plan_status(self):
        other = make_evaluation(self.owner, self.evaluation.facility, self.data)
        response = self.client.get(
            reverse("web_admin:plan_status"), {"ids": f"{self.evaluation.id},{other.id},999999"}
        )
        self.assertEqual(
            response.json()["statuses"],
            {str(self.evaluation.id): "generating", str(other.id): "not_generated"},
        )

    def test_plan_status_bad_ids(self):
        response = self.client.get(reverse("web_admin:plan_status"), {"ids": "1,x"})
        self.assertEqual(response.status_code, 400)


class PlanReviewTests(AdminApiTestCase):
    def setUp(self):
        super().setUp()
        owner = make_user()
        self.evaluation = make_evaluation(
            owner,
            make_facility(owner),
            make_questionnaire(),
            plan_status=PlanStatus.DRAFT,
            plan_content="# Draft plan",
        )

    def test_detail_includes_draft(self):
        response = self.client.get(reverse("web_admin:plan_detail", args=[self.evaluation.id]))
        plan = response.json()["plan"]
        self.assertEqual(plan["status"], "draft")
        self.assertEqual(plan["content"], "# Draft plan")
        self.assertTrue(plan["is_editable"])

    def test_save_then_publish(self):
        response = self.post_json(
            reverse("web_admin:plan_save", args=[self.evaluation.id]),
            {"content": "# Final plan", "actionable_measures": [{"measure": "Disinfect trailers", "category": "Transport"}]},
        )
        self.assertEqual(response.status_code, 200)

        response = self.post_json(reverse("web_admin:plan_publish", args=[self.evaluation.id]))
        self.assertEqual(response.status_code, 200)
        plan = response.json()["plan"]
        self.assertEqual(plan["status"], "published")
        self.assertFalse(plan["is_editable"])
        self.assertEqual(plan["actionable_measures"][0]["measure"], "Disinfect trailers")

        response = self.post_json(reverse("web_admin:plan_save", args=[self.evaluation.id]), {"content": "x"})
        self.assertEqual(response.status_code, 409)

    def test_regenerate_without_webhook(self):
        with override_settings(PLAN_GENERATION={"WEBHOOK_URL": ""}):
            response = self.post_json(reverse("web_admin:plan_regenerate", args=[self.evaluation.id]))
        self.assertEqual(response.status_code, 400)

    @override_settings(PLAN_GENERATION={"WEBHOOK_URL": "https://generator.example.org/plans"})
    @patch("web_admin.views.plans.schedule_plan_generation")
    def test_regenerate_draft(self, schedule):
        response = self.post_json(reverse("web_admin:plan_regenerate", args=[self.evaluation.id]))
        self.assertEqual(response.status_code, 202)
        schedule.assert_called_once_with(self.evaluation.id, force=True)

    @override_settings(PLAN_GENERATION={"WEBHOOK_URL": "https://generator.example.org/plans"})
    @patch("web_admin.views.plans.schedule_plan_generation")
    def test_regenerate_published(self, schedule):
        self.evaluation.plan_status = PlanStatus.PUBLISHED
        self.evaluation.save()
        response = self.post_json(reverse("web_admin:plan_regenerate", args=[self.evaluation.id]))
        self.assertEqual(response.status_code, 409)
        schedule.assert_not_called()

    @override_settings(PLAN_GENERATION={"WEBHOOK_URL": "https://generator.example.org/plans"})
    @patch("web_admin.views.plans.schedule_plan_generation")
    def test_regenerate_stuck_generation(self, schedule):
        self.evaluation.plan_status = PlanStatus.GENERATING
        self.evaluation.save()
        response = self.post_json(reverse("web_admin:plan_regenerate", args=[self.evaluation.id]))
        self.assertEqual(response.status_code, 202)
        schedule.assert_called_once_with(self.evaluation.id, force=True)

    def test_save_draft_over_stuck_generation(self):
        self.evaluation.plan_status = PlanStatus.GENERATING
        self.evaluation.save()
        response = self.post_json(
            reverse("web_admin:plan_save", args=[self.evaluation.id]), {"content": "# Written by hand"}
        )
        self.assertEqual(response.status_code, 200)
        self.evaluation.refresh_from_db()
        self.assertEqual(self.evaluation.plan_status, PlanStatus.DRAFT)
        self.assertEqual(self.evaluation.plan_content, "# Written by hand")
