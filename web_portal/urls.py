from django.urls import path

from . import views

app_name = "web_portal"

urlpatterns = [
    path("dashboard/", views.dashboard, name="dashboard"),
    path("facilities/", views.create_facility, name="create_facility"),
    path("consent/", views.give_consent, name="consent"),
    path("evaluate/questionnaire/", views.questionnaire, name="questionnaire"),
    path("evaluate/prefill/", views.prefill, name="prefill"),
    path("evaluate/score/", views.score, name="score"),
    path("evaluate/submit/", views.submit, name="submit"),
    path(
        "evaluations/<int:evaluation_id>/report/",
        views.evaluation_report,
        name="evaluation_report",
    ),
    path(
        "evaluations/<int:evaluation_id>/feedback/",
        views.evaluation_feedback,
        name="evaluation_feedback",
    ),
]
