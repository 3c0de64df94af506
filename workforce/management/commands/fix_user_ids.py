import re

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from workforce.models import User
from workforce.services.sequences import format_user_id, parse_user_id, resync, user_sequence_name

LEGACY_RE = re.compile(r'^U(\d+)$')


class Command(BaseCommand):
    help = "Convert legacy user ids (U001) to the USR-0001 format."

    def add_arguments(self, parser):
        mode = parser.add_mutually_exclusive_group(required=True)
        mode.add_argument('--dry-run', action='store_true', help="Only report what would change.")
        mode.add_argument('--execute', action='store_true', help="Apply the changes.")

    def handle(self, *args, **opts):
        taken = set(User.objects.values_list('user_id', flat=True))
        plan = []
        for pk, user_id in User.objects.order_by('pk').values_list('pk', 'user_id'):
            m = LEGACY_RE.match(user_id or '')
            if not m:
                continue
            number = int(m.group(1))
            if number > 9999:
                raise CommandError(f"{user_id} does not fit the USR-#### format")
            new_id = format_user_id(number)
            if new_id in taken:
                raise CommandError(f"{user_id} -> {new_id} clashes with an existing user id")
            taken.add(new_id)
            plan.append((pk, user_id, new_id))

        if not plan:
            self.stdout.write(self.style.SUCCESS("No legacy user ids found."))
            return

        for _, old, new in plan:
            self.stdout.write(f"{old} -> {new}")

        if opts['dry_run']:
            self.stdout.write(self.style.WARNING(f"Dry run: {len(plan)} user id(s) would be updated."))
            return

        with transaction.atomic():
            for pk, _, new in plan:
                User.objects.filter(pk=pk).update(user_id=new)
            highest = max(parse_user_id(new) for _, _, new in plan)
            resync(user_sequence_name(), highest)
        self.stdout.write(self.style.SUCCESS(f"Updated {len(plan)} user id(s)."))
