"""
URL configuration for the EquiSecure project.

- ``/users/``: registration, login, logout, current account;
- ``/api/``: respondent endpoints and the plan generator callback;
- ``/admin-api/``: administration endpoints;
- ``/admin/``: Django admin site.
"""

from django.contrib import admin
from django.urls import include, path

from web_portal.views import plan_callback

urlpatterns = [
    path("admin/", admin.site.urls),
    path("users/", include("users.urls")),
    path(
        "api/plans/<int:evaluation_id>/callback/",
        plan_callback,
        name="plan_callback",
    ),
    path("api/", include("web_portal.urls", namespace="web_portal")),
    path("admin-api/", include("web_admin.urls", namespace="web_admin")),
]
