"""Admin registrations for evaluations app."""

from .evaluation import EvaluationAdmin, FacilityAdmin, FeedbackMeasureAdmin  # noqa: F401
