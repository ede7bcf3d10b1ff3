"""Improvement recommendations derived from a finished evaluation."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from core.models.choices import QuestionType
from core.service.scoring import Answer, _to_decimal, question_risk_ceiling

NO_ANSWER = "no answer"


@dataclass(frozen=True)
class Recommendation:
    question_id: int
    question_text: str
    section_name: str
    current_answer: str
    recommendation: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def risk_ceiling(question: Mapping[str, Any]) -> Decimal:
    """Worst-case contribution of a question (highest risk it can add)."""
    return question_risk_ceiling(question)


def best_practice_score(question: Mapping[str, Any]) -> Optional[Decimal]:
    """
    Lowest option score of a question, i.e. the lowest-risk practice.

    ``None`` when the question has no options.
    """
    scores = [_to_decimal(opt.get("score")) for opt in question.get("options") or []]
    if not scores:
        return None
    return min(scores)


def _recommendation_for(
    question: Mapping[str, Any], section_name: str, answer: Answer
) -> Optional[Recommendation]:
    best = best_practice_score(question)
    if best is None:
        return None

    options = question.get("options") or []
    selected = [opt for opt in options if opt.get("id") in answer.selected_option_ids]
    if not any(_to_decimal(opt.get("score")) > best for opt in selected):
        return None

    tip = (question.get("improvement_tip") or "").strip()
    if tip:
        text = tip
    else:
        best_texts = [opt.get("text", "") for opt in options if _to_decimal(opt.get("score")) == best]
        text = "Consider implementing: " + " or ".join(best_texts)

    current = ", ".join(opt.get("text", "") for opt in selected) or NO_ANSWER
    return Recommendation(
        question_id=question.get("id"),
        question_text=question.get("text", ""),
        section_name=section_name,
        current_answer=current,
        recommendation=text,
    )


def derive_recommendations(
    tree: Mapping[str, Any], answers: Mapping[int, Answer]
) -> List[Recommendation]:
    """
    One recommendation per answered choice question whose selection scores
    above the question's best practice, in questionnaire order.
    """
    recommendations: List[Recommendation] = []
    for section in tree.get("sections") or []:
        for question in section.get("questions") or []:
            if question.get("q_type") == QuestionType.TEXT:
                continue
            answer = answers.get(question.get("id"))
            if answer is None:
                continue
            item = _recommendation_for(question, section.get("name", ""), answer)
            if item is not None:
                recommendations.append(item)
    return recommendations
