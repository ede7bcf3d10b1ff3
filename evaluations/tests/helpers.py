"""Shared fixtures for evaluations tests."""

from decimal import Decimal

from core.models import Question, Questionnaire, QuestionOption, Section, choices
from evaluations.models import Facility
from users.models import CustomUser


def make_user(email="owner@example.pt", **extra):
    return CustomUser.objects.create_user(email=email, password="S3cure-pass!", **extra)


def make_admin(email="admin@example.pt"):
    return CustomUser.objects.create_superuser(email=email, password="S3cure-pass!")


def make_facility(user, name="Quinta do Vale"):
    return Facility.objects.create(user=user, name=name, region="Ribatejo", facility_type="Stud farm")


def make_questionnaire(active=True):
    """
    Two sections:

    - Movements: single choice "Quarantine new arrivals?" scored 0 / 1 / 2;
    - Visitors: multiple choice "Visitor measures" scored 0 / 3 / -1, plus a free-text question.
    """
    questionnaire = Questionnaire.objects.create(name="Biosecurity", is_active=active)
    movements = Section.objects.create(questionnaire=questionnaire, name="Movements", order_index=0)
    visitors = Section.objects.create(questionnaire=questionnaire, name="Visitors", order_index=1)

    quarantine = Question.objects.create(
        section=movements,
        text="Quarantine new arrivals?",
        q_type=choices.QuestionType.SINGLE,
        order_index=0,
    )
    always = QuestionOption.objects.create(question=quarantine, text="Always", score=Decimal("0"), order_index=0)
    sometimes = QuestionOption.objects.create(question=quarantine, text="Sometimes", score=Decimal("1"), order_index=1)
    never = QuestionOption.objects.create(question=quarantine, text="Never", score=Decimal("2"), order_index=2)

    measures = Question.objects.create(
        section=visitors,
        text="Visitor measures",
        q_type=choices.QuestionType.MULTIPLE,
        order_index=0,
        improvement_tip="Keep a visitor log and provide boot covers.",
    )
    log = QuestionOption.objects.create(question=measures, text="Visitor log", score=Decimal("0"), order_index=0)
    free_access = QuestionOption.objects.create(question=measures, text="Free access", score=Decimal("3"), order_index=1)
    boots = QuestionOption.objects.create(question=measures, text="Boot covers", score=Decimal("-1"), order_index=2)

    notes = Question.objects.create(
        section=visitors, text="Other remarks", q_type=choices.QuestionType.TEXT, order_index=1
    )

    return {
        "questionnaire": questionnaire,
        "sections": (movements, visitors),
        "questions": (quarantine, measures, notes),
        "options": {
            "always": always,
            "sometimes": sometimes,
            "never": never,
            "log": log,
            "free_access": free_access,
            "boots": boots,
        },
    }


def sample_answers(data):
    """Sometimes (1 of 2) + visitor log and free access (3 of 3) + a remark: total 4 of 5."""
    quarantine, measures, notes = data["questions"]
    opts = data["options"]
    return [
        {"question_id": quarantine.id, "selected_option_ids": [opts["sometimes"].id]},
        {"question_id": measures.id, "selected_option_ids": [opts["log"].id, opts["free_access"].id]},
        {"question_id": notes.id, "text_answer": "Shared arena with neighbours"},
    ]


def make_evaluation(user, facility, data, total=0.8, section_scores=None, **fields):
    """Evaluation row written directly, bypassing submission side effects."""
    from evaluations.models import Evaluation

    movements, visitors = data["sections"]
    if section_scores is None:
        section_scores = [
            {"section_id": movements.id, "score": 0.5},
            {"section_id": visitors.id, "score": 1.0},
        ]
    return Evaluation.objects.create(
        facility=facility,
        questionnaire=data["questionnaire"],
        user=user,
        total_score=total,
        section_scores=section_scores,
        **fields,
    )
