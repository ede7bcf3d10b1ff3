from django.apps import AppConfig


class UsersConfig(AppConfig):
    """
    Django app configuration for the account domain (custom user, roles,
    consent).
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'
    verbose_name = 'Accounts'
