"""
Risk scoring engine.

Pure functions over a questionnaire tree (as produced by
``QuestionnaireService.get_questionnaire_tree``) and a mapping of
``question_id -> Answer``. No I/O; safe to call on every answer change.

Higher option scores mean higher risk. A question's risk ceiling is the
worst it can contribute; section and total percentages are the share of
that ceiling the respondent actually reached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from django.core.exceptions import ValidationError

from core.models.choices import QuestionType

ZERO = Decimal("0")


def _to_decimal(value: Optional[Decimal | float | int | str]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Answer:
    """One respondent answer; unanswered questions have no Answer at all."""

    selected_option_ids: FrozenSet[int] = field(default_factory=frozenset)
    text_answer: Optional[str] = None


@dataclass(frozen=True)
class SectionScore:
    section_id: int
    name: str
    current: Decimal
    max: Decimal
    fraction: float
    percentage: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "section_id": self.section_id,
            "name": self.name,
            "current": float(self.current),
            "max": float(self.max),
            "fraction": self.fraction,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class TotalScore:
    current: Decimal
    max: Decimal
    fraction: float
    percentage: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "current": float(self.current),
            "max": float(self.max),
            "fraction": self.fraction,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class ScoreSheet:
    sections: List[SectionScore]
    total: TotalScore

    def to_persistence_payload(self) -> Dict[str, Any]:
        """Fractions (0..1) as stored on an Evaluation row."""
        return {
            "total_score": self.total.fraction,
            "section_scores": [
                {"section_id": s.section_id, "score": s.fraction} for s in self.sections
            ],
        }

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sections": [s.as_dict() for s in self.sections],
            "total": self.total.as_dict(),
        }


def score_fraction(current: Decimal, maximum: Decimal) -> float:
    """``current / maximum``; 0.0 when nothing can be scored."""
    if maximum <= 0:
        return 0.0
    return float(current / maximum)


def fraction_to_percentage(fraction: float) -> float:
    """
    0..1 fraction -> 0..100 percentage.

    Both live scores and scores reloaded from a stored Evaluation pass
    through here, so the same fraction always renders the same number.
    """
    return round(float(fraction) * 100, 4)


def _option_scores(question: Mapping[str, Any]) -> List[Decimal]:
    return [_to_decimal(opt.get("score")) for opt in question.get("options") or []]


def question_risk_ceiling(question: Mapping[str, Any]) -> Decimal:
    """
    Highest score a question can contribute.

    - single choice: best option, floored at 0 so an all-negative question
      does not lower the section ceiling;
    - multiple choice: sum of the positive options;
    - free text: 0.
    """
    q_type = question.get("q_type")
    scores = _option_scores(question)
    if q_type == QuestionType.SINGLE:
        if not scores:
            return ZERO
        return max(ZERO, max(scores))
    if q_type == QuestionType.MULTIPLE:
        return sum((s for s in scores if s > 0), ZERO)
    return ZERO


def question_current_score(question: Mapping[str, Any], answer: Optional[Answer]) -> Decimal:
    q_type = question.get("q_type")
    if answer is None or q_type == QuestionType.TEXT:
        return ZERO

    selected = answer.selected_option_ids
    if q_type == QuestionType.SINGLE:
        for opt in question.get("options") or []:
            if opt.get("id") in selected:
                return _to_decimal(opt.get("score"))
        return ZERO
    if q_type == QuestionType.MULTIPLE:
        # Negative options count here; the section total is clamped instead.
        return sum(
            (
                _to_decimal(opt.get("score"))
                for opt in question.get("options") or []
                if opt.get("id") in selected
            ),
            ZERO,
        )
    return ZERO


def calculate_section_score(
    section: Mapping[str, Any], answers: Mapping[int, Answer]
) -> SectionScore:
    current = ZERO
    maximum = ZERO
    for question in section.get("questions") or []:
        maximum += question_risk_ceiling(question)
        current += question_current_score(question, answers.get(question.get("id")))

    current = max(current, ZERO)
    fraction = score_fraction(current, maximum)
    return SectionScore(
        section_id=section.get("id"),
        name=section.get("name", ""),
        current=current,
        max=maximum,
        fraction=fraction,
        percentage=fraction_to_percentage(fraction),
    )


def calculate_scores(tree: Mapping[str, Any], answers: Mapping[int, Answer]) -> ScoreSheet:
    """Score every section of ``tree`` in order and aggregate the total."""
    sections = [calculate_section_score(s, answers) for s in tree.get("sections") or []]
    current = sum((s.current for s in sections), ZERO)
    maximum = sum((s.max for s in sections), ZERO)
    fraction = score_fraction(current, maximum)
    total = TotalScore(
        current=current,
        max=maximum,
        fraction=fraction,
        percentage=fraction_to_percentage(fraction),
    )
    return ScoreSheet(sections=sections, total=total)


def _coerce_id(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {label}.") from exc


def parse_answers(raw: Any) -> Dict[int, Answer]:
    """
    Coerce request JSON into the answer mapping.

    Accepts ``[{"question_id": 1, "selected_option_ids": [3], "text_answer": null}, ...]``.
    Items with neither a selection nor text are treated as unanswered and dropped.
    """
    if raw is None:
        return {}
    if not isinstance(raw, list):
        raise ValidationError("Answers must be a list.")

    answers: Dict[int, Answer] = {}
    for item in raw:
        if not isinstance(item, dict):
            raise ValidationError("Each answer must be an object.")
        question_id = _coerce_id(item.get("question_id"), "question id")
        if question_id in answers:
            raise ValidationError(f"Question {question_id} answered more than once.")

        option_ids = item.get("selected_option_ids") or []
        if not isinstance(option_ids, (list, tuple)):
            raise ValidationError("selected_option_ids must be a list.")
        selected = frozenset(_coerce_id(oid, "option id") for oid in option_ids)

        text = item.get("text_answer")
        if text is not None and not isinstance(text, str):
            raise ValidationError("text_answer must be a string.")
        text = text.strip() if text else None

        if not selected and not text:
            continue
        answers[question_id] = Answer(selected_option_ids=selected, text_answer=text or None)
    return answers


def validate_answers(tree: Mapping[str, Any], answers: Mapping[int, Answer]) -> None:
    """Reject answers that do not fit the questionnaire they are submitted against."""
    questions = {
        q.get("id"): q
        for section in tree.get("sections") or []
        for q in section.get("questions") or []
    }
    for question_id, answer in answers.items():
        question = questions.get(question_id)
        if question is None:
            raise ValidationError(f"Question {question_id} is not part of this questionnaire.")
        q_type = question.get("q_type")
        if q_type == QuestionType.TEXT:
            if answer.selected_option_ids:
                raise ValidationError(f"Question {question_id} takes a text answer.")
            continue
        if answer.text_answer:
            raise ValidationError(f"Question {question_id} does not take a text answer.")
        option_ids = {opt.get("id") for opt in question.get("options") or []}
        unknown = answer.selected_option_ids - option_ids
        if unknown:
            raise ValidationError(
                f"Option(s) {sorted(unknown)} do not belong to question {question_id}."
            )
        if q_type == QuestionType.SINGLE and len(answer.selected_option_ids) > 1:
            raise ValidationError(f"Question {question_id} accepts a single option.")


def build_answer_rows(answers: Mapping[int, Answer]) -> List[Dict[str, Any]]:
    """Rows handed to EvaluationAnswer creation, one per answered question."""
    return [
        {
            "question_id": question_id,
            "selected_option_ids": sorted(answer.selected_option_ids)
            if answer.selected_option_ids
            else None,
            "text_answer": answer.text_answer or None,
        }
        for question_id, answer in answers.items()
    ]


def answers_from_rows(rows: Iterable[Mapping[str, Any]]) -> Dict[int, Answer]:
    """
    Rebuild the answer mapping from stored answer rows.

    Rows whose question has since been deleted (``question_id`` is None) are skipped.
    """
    answers: Dict[int, Answer] = {}
    for row in rows:
        question_id = row.get("question_id")
        if question_id is None:
            continue
        answers[question_id] = Answer(
            selected_option_ids=frozenset(row.get("selected_option_ids") or []),
            text_answer=row.get("text_answer") or None,
        )
    return answers
