import pytest

from workforce.models import Role, User
from workforce.services.profiles import build_defaults
from workforce.services.roles import lookup


def _user(role, name='Ann Marie Lee'):
    return User(user_id='USR-0001', name=name, email='ann@clinic.test', phone='5550100', role=role)


@pytest.mark.parametrize('role', list(Role))
def test_defaults_carry_identity_fields(role):
    user = _user(role)
    d = lookup(role)
    data = build_defaults(user, 'X-1')
    assert data[d.id_field] == 'X-1'
    assert data['user'] is user
    assert (data['name'], data['email'], data['phone']) == ('Ann Marie Lee', 'ann@clinic.test', '5550100')
    assert data['is_active'] is True
    assert 'join_date' in data
    # every key is a real field of the profile model
    names = {f.name for f in d.model._meta.get_fields()}
    assert set(data) <= names


def test_doctor_defaults():
    data = build_defaults(_user(Role.DOCTOR), 'DOC-0001')
    assert data['specialty'] == 'General Medicine'
    assert data['experience'] == 0
    assert data['is_accepting_new_patients'] is True


def test_technician_name_is_split():
    data = build_defaults(_user(Role.TECHNICIAN), 'T001')
    assert data['first_name'] == 'Ann'
    assert data['last_name'] == 'Marie Lee'
    assert data['department'] == 'Maintenance'


def test_single_word_technician_name():
    data = build_defaults(_user(Role.TECHNICIAN, name='Cher'), 'T001')
    assert data['first_name'] == 'Cher'
    assert data['last_name'] == ''


def test_missing_phone_becomes_blank():
    user = _user(Role.PHARMACIST)
    user.phone = None
    assert build_defaults(user, 'PHA-0001')['phone'] == ''


def test_unmapped_role_is_rejected():
    with pytest.raises(ValueError):
        build_defaults(_user('Nurse'), 'N-1')
