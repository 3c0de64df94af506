"""
Role specific identifier generation.

The next identifier is derived by scanning the identifiers already
issued for the role and taking ``max + 1``.  There is no per-role
counter: two transactions creating the same role at the same time can
compute the same value, and the loser fails on the unique index of the
identifier column (surfaced as ``DuplicateUserError``).  Callers retry.
"""
from __future__ import annotations

from django.db import transaction
from loguru import logger

from workforce.services.roles import lookup


def generate_role_id(role: str) -> str:
    """Return the next unused identifier for ``role``.

    Must run inside ``transaction.atomic()`` so the scan sees the same
    snapshot the following insert is written against.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError('generate_role_id must be called inside a transaction')
    descriptor = lookup(role)
    if descriptor is None:
        raise ValueError(f"No mapping found for role: {role}")

    field = descriptor.id_field
    # prefix match only; descriptor.parse enforces the exact shape
    existing = descriptor.model.objects.filter(
        **{f'{field}__startswith': descriptor.prefix + descriptor.separator}
    ).values_list(field, flat=True)

    max_number = 0
    for identifier in existing:
        number = descriptor.parse(identifier)
        if number is not None and number > max_number:
            max_number = number

    identifier = descriptor.format(max_number + 1)
    logger.debug(f"Next {role} identifier is {identifier} (highest existing: {max_number})")
    return identifier
