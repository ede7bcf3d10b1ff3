from .callback import plan_callback
from .dashboard import create_facility, dashboard, give_consent
from .evaluate import prefill, questionnaire, score, submit
from .report import evaluation_feedback, evaluation_report

__all__ = [
    "plan_callback",
    "dashboard",
    "create_facility",
    "give_consent",
    "questionnaire",
    "prefill",
    "score",
    "submit",
    "evaluation_report",
    "evaluation_feedback",
]
