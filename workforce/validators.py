"""Password policy plugged into ``AUTH_PASSWORD_VALIDATORS``."""
from __future__ import annotations

import re

from django.core.exceptions import ValidationError

SPECIAL_CHARACTERS = '!@#$%^&*()_+-=[]{}|;:,.<>?'


class PasswordComplexityValidator:
    """At least ``min_length`` characters with a letter, a digit and a special character."""

    def __init__(self, min_length: int = 6):
        self.min_length = min_length
        self._special = re.compile('[' + re.escape(SPECIAL_CHARACTERS) + ']')

    def validate(self, password, user=None):
        if len(password) < self.min_length:
            raise ValidationError(
                f"Password must be at least {self.min_length} characters long",
                code='password_too_short',
            )
        if not (re.search(r'[a-zA-Z]', password) and re.search(r'\d', password) and self._special.search(password)):
            raise ValidationError(
                f"Password must contain at least one letter, one number, and one special character ({SPECIAL_CHARACTERS})",
                code='password_too_simple',
            )

    def get_help_text(self):
        return (
            f"Your password must contain at least {self.min_length} characters, "
            "including a letter, a number and a special character."
        )
