import pytest

from workforce.models import Doctor, Role, Technician
from workforce.services.roles import ROLE_REGISTRY, has_role_support, lookup, supported_roles


def test_every_role_has_a_profile_table():
    assert set(supported_roles()) == {r.value for r in Role}
    for role in Role:
        assert has_role_support(role)


def test_lookup_accepts_enum_and_plain_value():
    assert lookup(Role.DOCTOR) is lookup('Doctor')
    d = lookup('Doctor')
    assert d.model is Doctor
    assert d.collection == 'doctors'
    assert d.id_field == 'doctor_id'


def test_unknown_role_has_no_descriptor():
    assert lookup('Nurse') is None
    assert lookup('') is None
    assert lookup(None) is None
    assert not has_role_support('Nurse')


def test_prefixed_identifier_shape():
    d = lookup(Role.LAB_SUPERVISOR)
    assert d.format(8) == 'LSUP-0008'
    assert d.parse('LSUP-0042') == 42
    assert d.parse('LSUP-42') is None
    assert d.parse('LAB-0042') is None


def test_technician_identifier_has_no_separator():
    d = lookup(Role.TECHNICIAN)
    assert d.model is Technician
    assert d.format(7) == 'T007'
    assert d.parse('T123') == 123
    assert d.parse('T-123') is None
    assert d.parse('T0123') is None


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        ROLE_REGISTRY['Nurse'] = ROLE_REGISTRY['Doctor']
