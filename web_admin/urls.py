from django.urls import path

from . import views

app_name = "web_admin"

urlpatterns = [
    path("stats/", views.stats, name="stats"),
    path("users/", views.user_list, name="user_list"),
    path("users/<int:user_id>/role/", views.user_role, name="user_role"),
    path("facilities/", views.facility_list, name="facility_list"),
    path("facilities/<int:facility_id>/toggle/", views.facility_toggle, name="facility_toggle"),
    path("questionnaires/", views.questionnaire_list, name="questionnaire_list"),
    path(
        "questionnaires/<int:questionnaire_id>/",
        views.questionnaire_detail,
        name="questionnaire_detail",
    ),
    path(
        "questionnaires/<int:questionnaire_id>/toggle/",
        views.questionnaire_toggle,
        name="questionnaire_toggle",
    ),
    path(
        "questionnaires/<int:questionnaire_id>/sections/",
        views.section_create,
        name="section_create",
    ),
    path("sections/<int:section_id>/", views.section_detail, name="section_detail"),
    path("sections/<int:section_id>/questions/", views.question_save, name="question_save"),
    path("questions/<int:question_id>/", views.question_delete, name="question_delete"),
    path("assessments/", views.assessment_list, name="assessment_list"),
    path("assessments/export/scores/", views.export_scores, name="export_scores"),
    path("assessments/export/full/", views.export_full, name="export_full"),
    path("assessments/plan-status/", views.plan_status, name="plan_status"),
    path("plans/<int:evaluation_id>/", views.plan_detail, name="plan_detail"),
    path("plans/<int:evaluation_id>/save/", views.plan_save, name="plan_save"),
    path("plans/<int:evaluation_id>/publish/", views.plan_publish, name="plan_publish"),
    path("plans/<int:evaluation_id>/regenerate/", views.plan_regenerate, name="plan_regenerate"),
]
