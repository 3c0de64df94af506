"""Login bookkeeping: failed attempt counting, lockout and last login."""
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from loguru import logger

from workforce.models import User


def register_failed_login(user: User) -> User:
    """Count a failed login and lock the account once the limit is hit.

    An expired lock starts the count again from one.
    """
    now = timezone.now()
    max_attempts = getattr(settings, 'LOGIN_MAX_ATTEMPTS', 5)
    lock_minutes = getattr(settings, 'LOGIN_LOCK_MINUTES', 15)

    if user.lock_until and user.lock_until < now:
        user.lock_until = None
        user.login_attempts = 1
    else:
        user.login_attempts += 1
        if user.login_attempts >= max_attempts and not user.is_locked:
            user.lock_until = now + timedelta(minutes=lock_minutes)
            logger.warning(f"Account locked for user: {user.email}")
    user.save(update_fields=['login_attempts', 'lock_until', 'updated_at'])
    return user


def register_successful_login(user: User) -> User:
    user.login_attempts = 0
    user.lock_until = None
    user.last_login = timezone.now()
    user.save(update_fields=['login_attempts', 'lock_until', 'last_login', 'updated_at'])
    return user


def admin_lock_until(locked: bool):
    """``lock_until`` value for the admin lock toggle (``None`` unlocks)."""
    if not locked:
        return None
    return timezone.now() + timedelta(days=getattr(settings, 'ADMIN_LOCK_DAYS', 3650))
