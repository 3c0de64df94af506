from django.core.management.base import BaseCommand

from workforce.models import User
from workforce.services.sequences import current_value, parse_user_id, resync, user_sequence_name


class Command(BaseCommand):
    help = "Raise the user_id counter to the highest USR-#### already issued (never lowers it)."

    def handle(self, *args, **opts):
        name = user_sequence_name()
        highest = 0
        for user_id in User.objects.values_list('user_id', flat=True).iterator():
            n = parse_user_id(user_id)
            if n is not None and n > highest:
                highest = n
        before = current_value(name)
        after = resync(name, highest)
        self.stdout.write(f"highest issued: {highest}, counter: {before} -> {after}")
        self.stdout.write(self.style.SUCCESS(f"Counter '{name}' in sync."))
