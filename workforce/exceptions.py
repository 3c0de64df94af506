"""
Errors raised by the user cascade and the unified API error handler.

Every cascade failure is reported as ``Failed to <operation> user with
role: <cause>``.  The subclass tells the caller what kind of failure
it was so the HTTP layer can pick a status code without parsing the
message.
"""
from __future__ import annotations

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler


class CascadeError(Exception):
    """A create/update/delete of a user and its profile did not commit."""
    code = 'cascade_failed'
    status_code = 500

    def __init__(self, operation: str, cause):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} user with role: {cause}")

    @property
    def detail(self):
        return str(self)


class UserNotFoundError(CascadeError):
    code = 'not_found'
    status_code = 404


class DuplicateUserError(CascadeError):
    """A unique index rejected the write (email, user_id or role id)."""
    code = 'duplicate'
    status_code = 409


class ProfileValidationError(CascadeError):
    """User or profile fields failed model validation."""
    code = 'validation_failed'
    status_code = 400

    @property
    def detail(self):
        message_dict = getattr(self.cause, 'message_dict', None)
        if message_dict:
            return message_dict
        return getattr(self.cause, 'messages', None) or str(self)


def api_exception_handler(exc, context):
    if isinstance(exc, CascadeError):
        return Response(
            {'ok': False, 'error': {'code': exc.code, 'message': str(exc), 'detail': exc.detail}},
            status=exc.status_code,
        )
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': 'api_error', 'message': detail}}, status=resp.status_code)
