"""Questionnaire authoring and loading services."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Prefetch

from core.models import Question, Questionnaire, QuestionOption, Section, choices

logger = logging.getLogger(__name__)


class QuestionnaireService:
    """Questionnaire business service."""

    @staticmethod
    def get_active_questionnaire() -> Optional[Questionnaire]:
        """
        [Purpose] The questionnaire respondents currently fill in.
        [Usage] Evaluation form, submission and prefill.
        Should more than one be active (data fixed by hand in the DB), the
        newest wins and a warning is logged.
        [Returns] The Questionnaire flagged ``is_active``; ``None`` when there is none.
        """
        active = list(Questionnaire.objects.filter(is_active=True).order_by("-created_at")[:2])
        if not active:
            return None
        if len(active) > 1:
            logger.warning(
                "More than one active questionnaire found, using id=%s", active[0].id
            )
        return active[0]

    @staticmethod
    def get_active_questionnaire_tree() -> Optional[Dict[str, Any]]:
        """[Purpose] Tree of the active questionnaire. [Returns] See get_questionnaire_tree; ``None`` when none is active."""
        questionnaire = QuestionnaireService.get_active_questionnaire()
        if questionnaire is None:
            return None
        return QuestionnaireService.get_questionnaire_tree(questionnaire.id)

    @staticmethod
    def get_questionnaire_tree(questionnaire_id: int) -> Optional[Dict[str, Any]]:
        """
        [Purpose] Load one questionnaire with its sections, questions and options.
        [Usage] Scoring, reports and the plan generation request. Nested
        ``Prefetch`` keeps the whole tree at four queries; every level is
        ordered by ``order_index`` (then id).
        [Args] questionnaire_id: primary key.
        [Returns] ``None`` if the id does not exist, otherwise::

            {'id': 1,
             'name': 'Biosecurity 2025',
             'version': 1,
             'is_active': True,
             'sections': [
                {'id': 3,
                 'name': 'Animal movements',
                 'order_index': 0,
                 'questions': [
                    {'id': 7,
                     'text': 'Are new horses quarantined?',
                     'q_type': 'SINGLE',
                     'order_index': 0,
                     'improvement_tip': 'Quarantine arrivals for 21 days.',
                     'options': [
                        {'id': 20, 'text': 'Always', 'score': Decimal('0.00'), 'order_index': 0},
                        {'id': 21, 'text': 'Never', 'score': Decimal('3.00'), 'order_index': 1}]}]}]}
        """
        options_qs = QuestionOption.objects.order_by("order_index", "id")
        questions_qs = Question.objects.order_by("order_index", "id").prefetch_related(
            Prefetch("options", queryset=options_qs)
        )
        sections_qs = Section.objects.order_by("order_index", "id").prefetch_related(
            Prefetch("questions", queryset=questions_qs)
        )

        questionnaire = (
            Questionnaire.objects.filter(id=questionnaire_id)
            .prefetch_related(Prefetch("sections", queryset=sections_qs))
            .first()
        )
        if questionnaire is None:
            return None
        return serialize_questionnaire(questionnaire)

    @staticmethod
    def list_questionnaires() -> List[Dict[str, Any]]:
        """
        [Purpose] Questionnaire overview for the admin API.
        [Returns] list of dicts, newest first, with section_count, question_count
        and evaluation_count.
        """
        qs = Questionnaire.objects.annotate(
            section_count=Count("sections", distinct=True),
            question_count=Count("sections__questions", distinct=True),
            evaluation_count=Count("evaluations", distinct=True),
        ).order_by("-created_at")
        return [
            {
                "id": q.id,
                "name": q.name,
                "version": q.version,
                "is_active": q.is_active,
                "created_at": q.created_at.isoformat(),
                "section_count": q.section_count,
                "question_count": q.question_count,
                "evaluation_count": q.evaluation_count,
            }
            for q in qs
        ]

    @staticmethod
    def create_questionnaire(name: str) -> Questionnaire:
        """
        [Purpose] Create an empty questionnaire, version 1 and inactive.
        [Args] name: required, stripped.
        [Returns] The new Questionnaire; ValidationError for a blank name.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Questionnaire name is required.")
        return Questionnaire.objects.create(name=name, version=1, is_active=False)

    @staticmethod
    @transaction.atomic
    def set_active(questionnaire_id: int, active: bool) -> Questionnaire:
        """
        [Purpose] Activate or deactivate a questionnaire.
        [Usage] Activating deactivates every other questionnaire in the same
        transaction, so at most one is ever active.
        [Args] active: target flag.
        [Returns] The updated Questionnaire.
        """
        questionnaire = Questionnaire.objects.select_for_update().get(pk=questionnaire_id)
        if active:
            Questionnaire.objects.exclude(pk=questionnaire.pk).filter(is_active=True).update(
                is_active=False
            )
        questionnaire.is_active = bool(active)
        questionnaire.save(update_fields=["is_active"])
        logger.info(
            "Questionnaire %s %s", questionnaire.pk, "activated" if active else "deactivated"
        )
        return questionnaire

    @staticmethod
    def delete_questionnaire(questionnaire_id: int) -> None:
        """
        [Purpose] Hard delete a questionnaire with its sections and questions.
        [Returns] None; ValidationError while evaluations reference it.
        """
        questionnaire = Questionnaire.objects.get(pk=questionnaire_id)
        if questionnaire.evaluations.exists():
            raise ValidationError(
                "This questionnaire has evaluations and cannot be deleted; deactivate it instead."
            )
        questionnaire.delete()

    # ------------------------------------------------------------------ sections

    @staticmethod
    def add_section(questionnaire_id: int, name: str) -> Section:
        """[Purpose] Append a section at the end of the questionnaire. [Returns] The new Section."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Section name is required.")
        questionnaire = Questionnaire.objects.get(pk=questionnaire_id)
        order_index = questionnaire.sections.count()
        return Section.objects.create(
            questionnaire=questionnaire, name=name, order_index=order_index
        )

    @staticmethod
    def rename_section(section_id: int, name: str) -> Section:
        """[Purpose] Rename a section. [Returns] The updated Section; ValidationError for a blank name."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Section name is required.")
        section = Section.objects.get(pk=section_id)
        section.name = name
        section.save(update_fields=["name"])
        return section

    @staticmethod
    def delete_section(section_id: int) -> None:
        """[Purpose] Delete a section and its questions; unknown ids are ignored."""
        # Stored evaluations keep their section scores; reports show the
        # missing section as N/A.
        Section.objects.filter(pk=section_id).delete()

    # ----------------------------------------------------------------- questions

    @staticmethod
    @transaction.atomic
    def save_question(
        section_id: int,
        text: str,
        q_type: str,
        options: Iterable[Dict[str, Any]] = (),
        improvement_tip: str = "",
        question_id: Optional[int] = None,
    ) -> Question:
        """
        [Purpose] Create or update a question and replace its option set.
        [Usage] Admin questionnaire editor.
        [Args]
        - options: ``[{"text": "Always", "score": 0}, ...]``; list order
          becomes ``order_index``. Ignored for free-text questions.
        - question_id: update this question instead of creating one.
        [Returns] The saved Question. ValidationError for empty text, an unknown
        type, a choice question without options or a non-numeric score.
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError("Question text is required.")
        if q_type not in choices.QuestionType.values:
            raise ValidationError("Invalid question type.")

        cleaned_options = []
        if q_type != choices.QuestionType.TEXT:
            for item in options or []:
                option_text = str(item.get("text") or "").strip()
                if not option_text:
                    continue
                try:
                    score = Decimal(str(item.get("score", 0)))
                except (InvalidOperation, ValueError) as exc:
                    raise ValidationError(f"Invalid score for option '{option_text}'.") from exc
                if not score.is_finite():
                    raise ValidationError(f"Invalid score for option '{option_text}'.")
                cleaned_options.append((option_text, score))
            if not cleaned_options:
                raise ValidationError("Choice questions need at least one option.")

        if question_id is not None:
            question = Question.objects.select_for_update().get(pk=question_id)
            question.text = text
            question.q_type = q_type
            question.improvement_tip = (improvement_tip or "").strip()
            question.save(update_fields=["text", "q_type", "improvement_tip"])
            question.options.all().delete()
        else:
            section = Section.objects.get(pk=section_id)
            question = Question.objects.create(
                section=section,
                text=text,
                q_type=q_type,
                improvement_tip=(improvement_tip or "").strip(),
                order_index=section.questions.count(),
            )

        QuestionOption.objects.bulk_create(
            [
                QuestionOption(question=question, text=option_text, score=score, order_index=index)
                for index, (option_text, score) in enumerate(cleaned_options)
            ]
        )
        return question

    @staticmethod
    def delete_question(question_id: int) -> None:
        """[Purpose] Delete a question and its options; unknown ids are ignored."""
        Question.objects.filter(pk=question_id).delete()


def serialize_questionnaire(questionnaire: Questionnaire) -> Dict[str, Any]:
    """Turn a prefetched questionnaire into the nested dict consumed by the scoring engine."""
    sections_data = []
    for section in questionnaire.sections.all():
        questions_data = []
        for question in section.questions.all():
            questions_data.append(
                {
                    "id": question.id,
                    "text": question.text,
                    "q_type": question.q_type,
                    "order_index": question.order_index,
                    "improvement_tip": question.improvement_tip,
                    "options": [
                        {
                            "id": opt.id,
                            "text": opt.text,
                            "score": opt.score,
                            "order_index": opt.order_index,
                        }
                        for opt in question.options.all()
                    ],
                }
            )
        sections_data.append(
            {
                "id": section.id,
                "name": section.name,
                "order_index": section.order_index,
                "questions": questions_data,
            }
        )

    return {
        "id": questionnaire.id,
        "name": questionnaire.name,
        "version": questionnaire.version,
        "is_active": questionnaire.is_active,
        "sections": sections_data,
    }


def jsonable_tree(tree: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a questionnaire tree with Decimal scores turned into floats for JSON responses."""
    return {
        **tree,
        "sections": [
            {
                **section,
                "questions": [
                    {
                        **question,
                        "options": [
                            {**opt, "score": float(opt["score"])} for opt in question["options"]
                        ],
                    }
                    for question in section["questions"]
                ],
            }
            for section in tree["sections"]
        ],
    }
