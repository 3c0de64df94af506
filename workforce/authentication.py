"""
Token authentication for the user management API.

Clients send ``Authorization: Bearer <key>`` (``Token <key>`` is also
accepted).  Keys are the DRF ``authtoken`` keys handed out by the login
endpoint.  A locked account is refused even when its token is valid.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions


class TokenAuthentication(authentication.TokenAuthentication):
    keyword = 'Bearer'
    keywords = ('Bearer', 'Token')

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if not auth or auth[0].decode(errors='ignore') not in self.keywords:
            return None
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header.')
        try:
            key = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid token header. Token string should not contain invalid characters.')
        return self.authenticate_credentials(key)

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        if getattr(user, 'is_locked', False):
            raise exceptions.AuthenticationFailed('Account is locked.')
        return user, token
