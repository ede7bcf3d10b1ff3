from django.apps import AppConfig


class WebPortalConfig(AppConfig):
    """JSON endpoints used by facility owners."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'web_portal'
    verbose_name = 'Respondent portal'
