# backend/apps/consulting/management/commands/seed_admin.py
"""
Django management command to create the admin portal credential
"""
import os

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand, CommandError

from apps.consulting.apps import get_services
from apps.consulting.auth import ADMIN_USERNAME
from apps.domain.models import AdminCredential

DEVELOPMENT_PASSWORD = "admin123"


class Command(BaseCommand):
    help = "Create the admin portal credential if it does not exist"

    def add_arguments(self, parser):
        parser.add_argument(
            "--username",
            type=str,
            default=ADMIN_USERNAME,
            help="Admin username (the portal logs in as 'admin')",
        )
        parser.add_argument(
            "--password",
            type=str,
            help="Admin password (defaults to ADMIN_PASSWORD)",
        )

    def handle(self, *args, **options):
        username = options["username"]
        password = options.get("password") or os.getenv("ADMIN_PASSWORD") or DEVELOPMENT_PASSWORD

        # Never ship the development password
        if settings.ENVIRONMENT == "production" and password == DEVELOPMENT_PASSWORD:
            raise CommandError(
                "Refusing to seed the development admin password in production. "
                "Pass --password or set ADMIN_PASSWORD."
            )

        credentials = get_services().admin_credentials

        if credentials.get_by_username(username):
            self.stdout.write(self.style.WARNING(f"Admin user '{username}' already exists"))
            return

        credentials.create(
            AdminCredential(username=username, password_hash=make_password(password))
        )

        self.stdout.write(self.style.SUCCESS(f"Created admin user '{username}'"))
        if password == DEVELOPMENT_PASSWORD:
            self.stdout.write(
                self.style.WARNING("Using the development password; change it before deploying")
            )
