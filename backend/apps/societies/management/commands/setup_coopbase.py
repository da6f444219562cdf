"""
Bootstrap management command.

Creates the schema and the default developer account.
Run: python manage.py setup_coopbase
"""

from django.core.management.base import BaseCommand
from core.db import bootstrap_schema
from core.exceptions import ConflictError
from apps.users import services as user_services
from apps.users.models import Role

DEFAULT_EMAIL = "admin@coopbase.com"
DEFAULT_PASSWORD = "admin123"


class Command(BaseCommand):
    help = "Create the database schema and the default developer account"

    def add_arguments(self, parser):
        parser.add_argument("--email", default=DEFAULT_EMAIL)
        parser.add_argument("--password", default=DEFAULT_PASSWORD)
        parser.add_argument("--name", default="System Administrator")
        parser.add_argument("--phone", default="+1234567890")

    def handle(self, *args, **options):
        self.stdout.write("Setting up CoopBase...")

        self.stdout.write("\n[1] Creating database schema...")
        bootstrap_schema()
        self.stdout.write(self.style.SUCCESS("  ✓ Schema is up to date"))

        self.stdout.write("\n[2] Creating developer account...")
        if user_services.list_users(role=Role.DEVELOPER).exists():
            self.stdout.write(
                self.style.WARNING("  Developer user already exists, skipping")
            )
            return

        try:
            user = user_services.create_developer(
                email=options["email"],
                password=options["password"],
                name=options["name"],
                phone=options["phone"],
            )
        except ConflictError as exc:
            self.stdout.write(self.style.WARNING(f"  {exc.message}"))
            return

        self.stdout.write(self.style.SUCCESS(f"  ✓ Developer created: {user.email}"))
        if options["password"] == DEFAULT_PASSWORD:
            self.stdout.write(
                self.style.WARNING("  Change the default password after first login")
            )
