"""
CSV exports of evaluations for administrators.

Both files are ``;``-separated and start with a UTF-8 BOM so spreadsheet
tools pick the right encoding.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from django.db.models import QuerySet
from django.utils import timezone

from core.service.questionnaire import QuestionnaireService
from core.service.scoring import fraction_to_percentage
from evaluations.models import Evaluation

CSV_DELIMITER = ";"
BOM = "\ufeff"
DATE_FORMAT = "%Y-%m-%d %H:%M"
NOT_AVAILABLE = "N/A"
NO_ANSWER = "No answer"


def export_queryset() -> QuerySet:
    return (
        Evaluation.objects.select_related("facility", "user")
        .prefetch_related("answers")
        .order_by("-created_at", "-id")
    )


def export_filename(kind: str, today: Optional[date] = None) -> str:
    """``evaluations_scores_2025-03-01.csv`` / ``evaluations_full_2025-03-01.csv``."""
    today = today or timezone.localdate()
    return f"evaluations_{kind}_{today.isoformat()}.csv"


def _format_date(value) -> str:
    return timezone.localtime(value).strftime(DATE_FORMAT)


def _format_percentage(fraction) -> str:
    return f"{fraction_to_percentage(fraction):.1f}"


def _new_writer():
    buffer = io.StringIO()
    buffer.write(BOM)
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, lineterminator="\n")
    return buffer, writer


def _newest(evaluations: List[Evaluation]) -> Optional[Evaluation]:
    if not evaluations:
        return None
    return max(evaluations, key=lambda ev: (ev.created_at, ev.id))


def build_scores_csv(evaluations: Iterable[Evaluation]) -> str:
    """
    [Purpose] Scores export: one row per evaluation with total and per-section percentages.
    [Usage] Section columns follow the sections of the newest evaluation's
    questionnaire; evaluations without a score for a column get N/A.
    [Returns] CSV text with a UTF-8 BOM.
    """
    evaluations = list(evaluations)
    sections: List[Dict[str, Any]] = []
    newest = _newest(evaluations)
    if newest is not None:
        tree = QuestionnaireService.get_questionnaire_tree(newest.questionnaire_id)
        sections = tree["sections"] if tree else []

    buffer, writer = _new_writer()
    writer.writerow(
        ["Facility", "User", "Date", "Total score (%)"] + [f"{s['name']} (%)" for s in sections]
    )
    for evaluation in evaluations:
        stored = evaluation.section_score_map
        row = [
            evaluation.facility.name,
            evaluation.user.email,
            _format_date(evaluation.created_at),
            _format_percentage(evaluation.total_score),
        ]
        for section in sections:
            fraction = stored.get(section["id"])
            row.append(_format_percentage(fraction) if fraction is not None else NOT_AVAILABLE)
        writer.writerow(row)
    return buffer.getvalue()


def _answer_text(answer, question: Dict[str, Any]) -> str:
    if answer is None:
        return NO_ANSWER
    if answer.text_answer:
        return answer.text_answer
    selected = set(answer.selected_options or [])
    texts = [opt["text"] for opt in question["options"] if opt["id"] in selected]
    return ", ".join(texts) if texts else NO_ANSWER


def build_full_csv(evaluations: Iterable[Evaluation]) -> str:
    """[Purpose] Full export: one row per (evaluation, section, question) with the resolved answer text. [Returns] CSV text with a UTF-8 BOM."""
    trees: Dict[int, Dict[str, Any]] = {}
    buffer, writer = _new_writer()
    writer.writerow(["Facility", "User", "Date", "Section", "Question", "Answer"])

    for evaluation in evaluations:
        if evaluation.questionnaire_id not in trees:
            trees[evaluation.questionnaire_id] = QuestionnaireService.get_questionnaire_tree(
                evaluation.questionnaire_id
            ) or {"sections": []}
        tree = trees[evaluation.questionnaire_id]
        answers = {a.question_id: a for a in evaluation.answers.all() if a.question_id is not None}
        prefix = [
            evaluation.facility.name,
            evaluation.user.email,
            _format_date(evaluation.created_at),
        ]
        for section in tree["sections"]:
            for question in section["questions"]:
                writer.writerow(
                    prefix
                    + [
                        section["name"],
                        question["text"],
                        _answer_text(answers.get(question["id"]), question),
                    ]
                )
    return buffer.getvalue()
