"""
User management views.

Administrators create, update and delete users here.  Every write goes
through :mod:`workforce.services.users` so the role profile is kept in
lockstep with the user; cascade errors are rendered by the unified
exception handler.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from workforce.models import User
from workforce.serializers.users import (
    UserCreateSerializer,
    UserUpdateSerializer,
    profile_payload,
    user_list_payload,
    user_payload,
)
from workforce.services.auth import admin_lock_until
from workforce.services.roles import ROLE_REGISTRY, lookup
from workforce.services.users import (
    create_user_with_role,
    delete_user_with_role,
    get_user_with_role_data,
    update_user_with_role,
)

from ..permissions import IsAdminRole


def _cascade_response(result, status_code=status.HTTP_200_OK):
    descriptor = lookup(result.user.role) if result.user is not None else None
    return Response({
        'success': result.success,
        'data': user_payload(result.user) if result.user is not None else None,
        'roleData': profile_payload(result.role_data) if result.role_data is not None else None,
        'roleCollection': descriptor.collection if descriptor else None,
        'message': result.message,
    }, status=status_code)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def users_collection(request):
    if request.method == 'POST':
        s = UserCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = create_user_with_role(s.validated_data, actor=request.user)
        return _cascade_response(result, status.HTTP_201_CREATED)

    qs = User.objects.all()
    role = request.query_params.get('role')
    if role:
        qs = qs.filter(role=role)
    keyword = (request.query_params.get('q') or '').strip()
    if keyword:
        qs = qs.filter(Q(name__icontains=keyword) | Q(email__icontains=keyword) | Q(user_id__icontains=keyword))
    return Response({'success': True, 'data': [user_list_payload(u) for u in qs.order_by('name', 'pk')]})


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk: int):
    if request.method == 'GET':
        return _cascade_response(get_user_with_role_data(pk))

    if request.method == 'DELETE':
        result = delete_user_with_role(pk, actor=request.user)
        return Response({'success': result.success, 'message': result.message})

    s = UserUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    # the lock toggle wins over an explicit lockUntil
    if 'is_locked' in data:
        locked = data.pop('is_locked')
        data['lock_until'] = admin_lock_until(locked)
        if not locked:
            data['login_attempts'] = 0
    return _cascade_response(update_user_with_role(pk, data, actor=request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def supported_roles_view(request):
    return Response({
        'success': True,
        'data': [
            {
                'role': d.role,
                'collection': d.collection,
                'prefix': d.prefix,
                'idField': d.id_field,
                'pattern': d.pattern.pattern,
            }
            for d in ROLE_REGISTRY.values()
        ],
    })
