"""
Email/password login.

Failed attempts are counted on the user; once the limit is reached the
account is locked for a while and further attempts are refused before
the password is even checked.
"""
from __future__ import annotations

from django.contrib.auth import authenticate
from loguru import logger
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from workforce.models import User
from workforce.serializers.auth import LoginSerializer
from workforce.services.audit import log_action
from workforce.services.auth import register_failed_login, register_successful_login


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']
    password = s.validated_data['password']
    ip = request.META.get('REMOTE_ADDR')

    account = User.objects.filter(email=email).first()
    if account is not None and account.is_locked:
        return Response(
            {'ok': False, 'detail': 'Account is temporarily locked due to too many failed login attempts'},
            status=423,
        )

    user = authenticate(request, username=email, password=password)
    if user is None:
        if account is not None:
            register_failed_login(account)
        log_action(actor=None, action='login', object_type='user',
                   object_id=account.user_id if account else None,
                   detail={'result': 'fail', 'email': email, 'ip': ip})
        logger.info(f"Failed login for {email}")
        return Response({'ok': False, 'detail': 'Invalid email or password'}, status=401)

    register_successful_login(user)
    log_action(actor=user, action='login', object_type='user', object_id=user.user_id,
               detail={'result': 'ok', 'ip': ip})
    token, _ = Token.objects.get_or_create(user=user)
    return Response({
        'ok': True,
        'token': token.key,
        'user': {
            'id': user.pk,
            'user_id': user.user_id,
            'name': user.name,
            'email': user.email,
            'role': user.role,
            'isFirstLogin': user.is_first_login,
        },
    })


# ScopedRateThrottle reads throttle_scope from the wrapped view class
login_view.cls.throttle_scope = 'login'
