from . import choices
from .evaluation import Evaluation
from .evaluation_answer import EvaluationAnswer
from .facility import Facility
from .feedback_measure import FeedbackMeasure

__all__ = [
    "choices",
    "Evaluation",
    "EvaluationAnswer",
    "Facility",
    "FeedbackMeasure",
]
