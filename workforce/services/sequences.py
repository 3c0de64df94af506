"""Durable named sequences backed by the ``counters`` table."""
from __future__ import annotations

import re
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F

from workforce.models import Counter

USER_ID_RE = re.compile(r'^USR-(\d{4})$')


def user_sequence_name() -> str:
    return getattr(settings, 'USER_ID_SEQUENCE', 'user_id')


def increment_and_get(name: str) -> int:
    """Bump the ``name`` sequence and return the new value.

    The counter row is created on first use.  The increment is a single
    ``UPDATE ... SET seq = seq + 1`` so concurrent callers serialise on
    the row lock instead of reading the same value.  When called inside
    an outer transaction the increment rolls back with it.
    """
    with transaction.atomic():
        Counter.objects.get_or_create(name=name)
        Counter.objects.filter(name=name).update(seq=F('seq') + 1)
        return Counter.objects.values_list('seq', flat=True).get(name=name)


def current_value(name: str) -> int:
    seq = Counter.objects.filter(name=name).values_list('seq', flat=True).first()
    return seq or 0


def resync(name: str, floor: int) -> int:
    """Raise the counter to at least ``floor``.  Never lowers it."""
    with transaction.atomic():
        counter, _ = Counter.objects.select_for_update().get_or_create(name=name)
        if floor > counter.seq:
            counter.seq = floor
            counter.save(update_fields=['seq'])
        return counter.seq


def format_user_id(number: int) -> str:
    return f"USR-{number:04d}"


def parse_user_id(value: Optional[str]) -> Optional[int]:
    match = USER_ID_RE.match(value or '')
    return int(match.group(1)) if match else None


def next_user_id() -> str:
    return format_user_id(increment_and_get(user_sequence_name()))
