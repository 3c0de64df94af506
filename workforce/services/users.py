"""
Cascade lifecycle for users and their role profiles.

A user and its role profile are always written together inside one
``transaction.atomic()`` block, so other readers never observe a user
without its profile or a profile whose user is gone.  Failures are
wrapped in a :class:`~workforce.exceptions.CascadeError` subclass and
re-raised; nothing is swallowed here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from loguru import logger

from workforce.exceptions import CascadeError, DuplicateUserError, ProfileValidationError, UserNotFoundError
from workforce.models import Role, User
from workforce.services.audit import log_action
from workforce.services.identifiers import generate_role_id
from workforce.services.profiles import build_defaults
from workforce.services.roles import RoleDescriptor, lookup
from workforce.services.sequences import format_user_id, increment_and_get, user_sequence_name

SHARED_FIELDS = ('name', 'email', 'phone')

CREATE_FIELDS = frozenset({'name', 'email', 'phone', 'address', 'age', 'gender', 'dob', 'role'})
UPDATE_FIELDS = frozenset({
    'name', 'email', 'phone', 'address', 'age', 'gender', 'dob', 'role',
    'is_active', 'is_first_login', 'login_attempts', 'lock_until',
})


@dataclass
class CascadeResult:
    success: bool
    user: Optional[User] = None
    role_data: Any = None
    message: str = ''

    def as_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'user': self.user,
            'roleData': self.role_data,
            'message': self.message,
        }


def _wrap(operation: str, exc: Exception) -> CascadeError:
    if isinstance(exc, IntegrityError):
        return DuplicateUserError(operation, exc)
    if isinstance(exc, ValidationError):
        return ProfileValidationError(operation, exc)
    return CascadeError(operation, exc)


def _normalise(user: User) -> None:
    user.name = (user.name or '').strip()
    user.email = (user.email or '').strip().lower()
    user.phone = (user.phone or '').strip()


def _check_fields(data: Mapping[str, Any], allowed: frozenset) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValidationError({field: ['This field cannot be set here.'] for field in unknown})


def _apply_password(user: User, password: Optional[str]) -> None:
    if password:
        try:
            validate_password(password, user)
        except ValidationError as exc:
            raise ValidationError({'password': exc.messages}) from exc
        user.set_password(password)
    elif user.role != Role.PATIENT:
        raise ValidationError({'password': ['Password is required for non-patient users']})
    else:
        user.set_unusable_password()


def _get_user(operation: str, user_pk, *, lock: bool = False) -> User:
    qs = User.objects.select_for_update() if lock else User.objects.all()
    try:
        user = qs.filter(pk=user_pk).first()
    except (TypeError, ValueError):
        user = None
    if user is None:
        raise UserNotFoundError(operation, 'User not found')
    return user


def _provision_profile(user: User, descriptor: RoleDescriptor):
    role_id = generate_role_id(user.role)
    logger.info(f"Generated role-specific ID: {role_id}")
    profile = descriptor.model(**build_defaults(user, role_id))
    profile.full_clean(validate_unique=False)
    profile.save()
    logger.info(f"Role-specific entry created in: {descriptor.collection}")
    return profile


def attach_role_profile(user: User):
    """Provision the profile for ``user.role`` unless one already exists.

    For users written outside :func:`create_user_with_role` (the manager's
    ``create_superuser``).  Must run inside the transaction that saved the user.
    """
    descriptor = lookup(user.role)
    if descriptor is None:
        return None
    existing = descriptor.model.objects.filter(user=user).first()
    return existing if existing is not None else _provision_profile(user, descriptor)


def _sync_shared_fields(user: User, descriptor: RoleDescriptor):
    profile = descriptor.model.objects.filter(user=user).first()
    if profile is None:
        return None
    for field in SHARED_FIELDS:
        setattr(profile, field, getattr(user, field))
    profile.full_clean(validate_unique=False)
    profile.save(update_fields=[*SHARED_FIELDS, 'updated_at'])
    return profile


def _switch_profile(user: User, previous_role: str):
    """Move ``user`` from the profile table of ``previous_role`` to its current one."""
    previous = lookup(previous_role)
    if previous is not None:
        previous.model.objects.filter(user=user).delete()
        logger.info(f"Removed {previous_role} profile of {user.user_id} after role change")
    descriptor = lookup(user.role)
    if descriptor is None:
        return None
    existing = _sync_shared_fields(user, descriptor)
    return existing if existing is not None else _provision_profile(user, descriptor)


def create_user_with_role(user_data: Mapping[str, Any], *, actor: Optional[User] = None) -> CascadeResult:
    """Create a user and, when its role is registered, its role profile.

    ``user_id`` is always minted from the user counter; a value passed in
    ``user_data`` is ignored.  ``role`` defaults to Patient.
    """
    data = dict(user_data)
    password = data.pop('password', None)
    data.pop('user_id', None)
    data['role'] = data.get('role') or Role.PATIENT.value
    try:
        with transaction.atomic():
            _check_fields(data, CREATE_FIELDS)
            sequence = user_sequence_name()
            user_id = format_user_id(increment_and_get(sequence))
            if User.objects.filter(user_id=user_id).exists():
                bumped = increment_and_get(sequence)
                logger.warning(f"Counter collision detected for {user_id}, advanced to {bumped}")
                user_id = format_user_id(bumped)

            user = User(user_id=user_id, **data)
            _normalise(user)
            _apply_password(user, password)
            user.full_clean(validate_unique=False)
            user.save()
            logger.info(f"User created: {user.user_id} | Role: {user.role}")

            profile = None
            descriptor = lookup(user.role)
            if descriptor is None:
                logger.info(f"No role-specific collection for role: {user.role}")
            else:
                profile = _provision_profile(user, descriptor)

            log_action(
                actor=actor, action='user_create', object_type='user', object_id=user.user_id,
                detail={'role': user.role, 'profile': getattr(profile, descriptor.id_field, None) if descriptor else None},
            )
    except CascadeError:
        raise
    except Exception as exc:
        logger.error(f"Error in cascade user creation: {exc}")
        raise _wrap('create', exc) from exc

    if profile is None:
        return CascadeResult(True, user, None, 'User created successfully')
    return CascadeResult(True, user, profile, f"User and {user.role.lower()} profile created successfully")


def update_user_with_role(user_pk, update_data: Mapping[str, Any], *, actor: Optional[User] = None) -> CascadeResult:
    """Update a user and push the shared fields onto its role profile.

    Only ``name``, ``email`` and ``phone`` are copied to the profile.
    Changing ``role`` swaps the profile: the old one is removed and a
    new one is provisioned, in the same transaction.
    """
    data = dict(update_data)
    password = data.pop('password', None)
    try:
        with transaction.atomic():
            user = _get_user('update', user_pk, lock=True)
            _check_fields(data, UPDATE_FIELDS)
            previous_role = user.role
            for field, value in data.items():
                setattr(user, field, value)
            _normalise(user)
            if password:
                _apply_password(user, password)
            user.full_clean(validate_unique=False)
            user.save()

            if user.role != previous_role:
                profile = _switch_profile(user, previous_role)
            else:
                descriptor = lookup(user.role)
                profile = _sync_shared_fields(user, descriptor) if descriptor else None
            if profile is not None:
                logger.info(f"Role-specific data updated for: {user.role}")

            log_action(
                actor=actor, action='user_update', object_type='user', object_id=user.user_id,
                detail={'fields': sorted(data) + (['password'] if password else []), 'previousRole': previous_role},
            )
    except CascadeError:
        raise
    except Exception as exc:
        logger.error(f"Error in cascade user update: {exc}")
        raise _wrap('update', exc) from exc

    if profile is None:
        return CascadeResult(True, user, None, 'User updated successfully')
    return CascadeResult(True, user, profile, 'User and role data updated successfully')


def delete_user_with_role(user_pk, *, actor: Optional[User] = None) -> CascadeResult:
    """Delete the role profile first, then the user."""
    try:
        with transaction.atomic():
            user = _get_user('delete', user_pk, lock=True)
            descriptor = lookup(user.role)
            if descriptor is not None:
                descriptor.model.objects.filter(user=user).delete()
                logger.info(f"Role-specific data deleted for: {user.role}")
            log_action(
                actor=actor, action='user_delete', object_type='user', object_id=user.user_id,
                detail={'role': user.role},
            )
            user.delete()
            logger.info(f"User deleted: {user.user_id}")
    except CascadeError:
        raise
    except Exception as exc:
        logger.error(f"Error in cascade user deletion: {exc}")
        raise _wrap('delete', exc) from exc

    return CascadeResult(True, None, None, 'User and role data deleted successfully')


def get_user_with_role_data(user_pk) -> CascadeResult:
    user = _get_user('fetch', user_pk)
    descriptor = lookup(user.role)
    if descriptor is None:
        return CascadeResult(True, user, None)
    return CascadeResult(True, user, descriptor.model.objects.filter(user=user).first())
