from .questionnaire import Questionnaire
from .section import Section
from .question import Question
from .question_option import QuestionOption
from . import choices

__all__ = [
    "Questionnaire",
    "Section",
    "Question",
    "QuestionOption",
    "choices",
]
