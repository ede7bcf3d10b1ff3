"""EquiSecure custom admin site configuration."""

from django.conf import settings
from django.contrib.admin import AdminSite
from django.contrib.admin.apps import AdminConfig


class EquiSecureAdminSite(AdminSite):
    site_header = "EquiSecure administration"
    site_title = "EquiSecure"
    index_title = "Biosecurity back office"

    def get_app_list(self, request, app_label=None):
        app_dict = self._build_app_dict(request, app_label)
        ordered_list = []
        preferred_order = getattr(settings, "ADMIN_APP_ORDER", [])

        for label in preferred_order:
            app_config = app_dict.pop(label, None)
            if app_config:
                ordered_list.append(app_config)

        # Remaining apps are appended alphabetically.
        ordered_list.extend(sorted(app_dict.values(), key=lambda app: app["name"].lower()))
        return ordered_list


class EquiSecureAdminConfig(AdminConfig):
    default_site = "equisecure.admin_site.EquiSecureAdminSite"
