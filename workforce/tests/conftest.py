import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from workforce.models import Role, User

PASSWORD = 'Str0ng!Pass#2024'


@pytest.fixture(autouse=True)
def _reset_throttles():
    # throttle history lives in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    # explicit user_id keeps the counter untouched
    return User.objects.create_user(
        email='root@clinic.test', password=PASSWORD, name='Root Admin', role=Role.ADMIN, user_id='USR-9000',
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
