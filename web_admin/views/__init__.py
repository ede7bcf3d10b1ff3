from .assessments import assessment_list, export_full, export_scores, plan_status
from .management import facility_list, facility_toggle, stats, user_list, user_role
from .plans import plan_detail, plan_publish, plan_regenerate, plan_save
from .questionnaires import (
    question_delete,
    question_save,
    questionnaire_detail,
    questionnaire_list,
    questionnaire_toggle,
    section_create,
    section_detail,
)

__all__ = [
    "stats",
    "user_list",
    "user_role",
    "facility_list",
    "facility_toggle",
    "questionnaire_list",
    "questionnaire_detail",
    "questionnaire_toggle",
    "section_create",
    "section_detail",
    "question_save",
    "question_delete",
    "assessment_list",
    "export_scores",
    "export_full",
    "plan_status",
    "plan_detail",
    "plan_save",
    "plan_publish",
    "plan_regenerate",
]
