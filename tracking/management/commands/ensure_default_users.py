# tracking/management/commands/ensure_default_users.py
from django.conf import settings
from django.core.management.base import BaseCommand

from tracking.models import User


class Command(BaseCommand):
    help = "Ensure the default technician/nurse/admin accounts exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--reset-passwords", action="store_true", help="Reset passwords of existing accounts.")

    def handle(self, *args, **opts):
        for entry in settings.FALLBACK_USERS:
            defaults = {
                "name": entry["name"],
                "email": entry["email"],
                "phone": entry["phone"],
                "role": entry["role"],
                "department": entry["department"],
                "is_active": True,
                "is_staff": entry["role"] == User.ROLE_ADMIN,
            }
            user, created = User.objects.get_or_create(username=entry["username"], defaults=defaults)
            if created or opts["reset_passwords"]:
                user.set_password(entry["password"])
                user.is_active = True
                user.save()
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {user.username} ({user.role})"))
        self.stdout.write(self.style.SUCCESS("Default users ensured."))
