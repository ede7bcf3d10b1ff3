from .facility import FacilityService
from .plans import PlanService, PlanTransitionError
from .submission import (
    EvaluationSubmissionError,
    EvaluationSubmissionService,
    NoActiveQuestionnaireError,
)

__all__ = [
    "EvaluationSubmissionError",
    "EvaluationSubmissionService",
    "FacilityService",
    "NoActiveQuestionnaireError",
    "PlanService",
    "PlanTransitionError",
]
