from django.core.management.base import BaseCommand

from workforce.models import Role, User
from workforce.services.users import create_user_with_role

DEMO_PASSWORD = "Demo#Pass2024"


class Command(BaseCommand):
    help = "Ensure one demo user (with role profile) exists per role. Idempotent."

    def add_arguments(self, parser):
        parser.add_argument('--password', default=DEMO_PASSWORD)
        parser.add_argument('--domain', default='clinic.local')

    def handle(self, *args, **opts):
        for role in Role:
            email = f"{role.value.lower()}@{opts['domain']}"
            user = User.objects.filter(email=email).first()
            if user is None:
                result = create_user_with_role({
                    'name': f"Demo {role.label}",
                    'email': email,
                    'role': role.value,
                    'password': opts['password'],
                })
                user = result.user
                self.stdout.write(self.style.SUCCESS(f"created: {user.user_id} {email} ({role.value})"))
            else:
                self.stdout.write(f"exists: {user.user_id} {email} ({user.role})")
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
