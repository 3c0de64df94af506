from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from workforce.models import Role, User
from workforce.services.roles import lookup
from workforce.services.sequences import current_value
from workforce.services.users import create_user_with_role

from .conftest import PASSWORD

pytestmark = pytest.mark.django_db


def _bare_user(user_id, n):
    return User.objects.create_user(email=f'legacy{n}@clinic.test', name=f'Legacy {n}', user_id=user_id)


def test_resync_counters_raises_to_highest_issued():
    _bare_user('USR-0042', 1)
    _bare_user('USR-0007', 2)
    out = StringIO()
    call_command('resync_counters', stdout=out)
    assert current_value('user_id') == 42
    assert '0 -> 42' in out.getvalue()
    result = create_user_with_role({'name': 'New Doc', 'email': 'new@clinic.test', 'role': 'Doctor', 'password': PASSWORD})
    assert result.user.user_id == 'USR-0043'


def test_fix_user_ids_dry_run_changes_nothing():
    _bare_user('U001', 1)
    out = StringIO()
    call_command('fix_user_ids', '--dry-run', stdout=out)
    assert 'U001 -> USR-0001' in out.getvalue()
    assert User.objects.filter(user_id='U001').exists()


def test_fix_user_ids_execute():
    _bare_user('U001', 1)
    _bare_user('U017', 2)
    _bare_user('USR-0005', 3)
    call_command('fix_user_ids', '--execute', stdout=StringIO())
    assert set(User.objects.values_list('user_id', flat=True)) == {'USR-0001', 'USR-0017', 'USR-0005'}
    assert current_value('user_id') == 17


def test_fix_user_ids_refuses_clashes():
    _bare_user('U001', 1)
    _bare_user('USR-0001', 2)
    with pytest.raises(CommandError):
        call_command('fix_user_ids', '--execute', stdout=StringIO())
    assert User.objects.filter(user_id='U001').exists()


def test_fix_user_ids_needs_a_mode():
    with pytest.raises(CommandError):
        call_command('fix_user_ids')


def test_ensure_demo_users_is_idempotent():
    call_command('ensure_demo_users', stdout=StringIO())
    call_command('ensure_demo_users', stdout=StringIO())
    assert User.objects.count() == len(Role)
    for role in Role:
        assert lookup(role).model.objects.count() == 1


def test_migrations_match_models():
    # --check exits non-zero when the models have drifted from the migrations
    call_command('makemigrations', 'workforce', '--check', '--dry-run', stdout=StringIO())
