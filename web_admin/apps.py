from django.apps import AppConfig


class WebAdminConfig(AppConfig):
    """JSON and CSV endpoints behind the administration screens."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'web_admin'
    verbose_name = 'Administration API'
