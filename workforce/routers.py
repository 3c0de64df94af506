"""
URL mappings for the user management API.

Trailing slashes are omitted; ``APPEND_SLASH`` is off in settings.
The static ``users/roles`` route is listed before ``users/<pk>``.
"""
from django.urls import path

from .views.auth import login_view
from .views.users import supported_roles_view, user_detail, users_collection

urlpatterns = [
    path('api/auth/login', login_view, name='auth-login'),
    path('api/users', users_collection, name='users'),
    path('api/users/roles', supported_roles_view, name='user-roles'),
    path('api/users/<int:pk>', user_detail, name='user-detail'),
]
