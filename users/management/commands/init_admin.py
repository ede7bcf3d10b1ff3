"""Create the first administrator at deploy time from environment variables."""

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Create the initial administrator from SUPER_USER_EMAIL / SUPER_USER_PASSWORD."

    def handle(self, *args, **options):
        email = (os.getenv("SUPER_USER_EMAIL") or "").strip().lower()
        password = os.getenv("SUPER_USER_PASSWORD")
        full_name = os.getenv("SUPER_USER_NAME", "")

        missing = [
            key
            for key, value in {
                "SUPER_USER_EMAIL": email,
                "SUPER_USER_PASSWORD": password,
            }.items()
            if not value
        ]
        if missing:
            raise CommandError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        User = get_user_model()
        if User.objects.filter(email=email).exists():
            self.stdout.write(self.style.SUCCESS("Administrator already exists. Skipping."))
            return

        User.objects.create_superuser(email=email, password=password, full_name=full_name)
        self.stdout.write(self.style.SUCCESS("Administrator created successfully."))
