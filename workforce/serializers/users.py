import bleach
from django.forms.models import model_to_dict
from rest_framework import serializers

from workforce.models import Role, User


def _clean_text(v):
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class UserCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(required=False, allow_blank=True, max_length=20)
    address = serializers.CharField(required=False, allow_blank=True, max_length=500)
    age = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=150)
    gender = serializers.ChoiceField(choices=User.GENDER_CHOICES, required=False, allow_blank=True)
    dob = serializers.DateField(required=False, allow_null=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.PATIENT.value)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate_name(self, v):
        v = _clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_address(self, v):
        return _clean_text(v)

    def validate(self, attrs):
        if not attrs.get('password') and attrs.get('role') != Role.PATIENT:
            raise serializers.ValidationError({'password': 'Password is required for non-patient users'})
        return attrs


class UserUpdateSerializer(serializers.Serializer):
    """Allow-listed user fields; camelCase keys map onto model fields."""
    name = serializers.CharField(required=False, max_length=100)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=20)
    address = serializers.CharField(required=False, allow_blank=True, max_length=500)
    age = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=150)
    gender = serializers.ChoiceField(choices=User.GENDER_CHOICES, required=False, allow_blank=True)
    dob = serializers.DateField(required=False, allow_null=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    isActive = serializers.BooleanField(required=False, source='is_active')
    isFirstLogin = serializers.BooleanField(required=False, source='is_first_login')
    loginAttempts = serializers.IntegerField(required=False, min_value=0, source='login_attempts')
    lockUntil = serializers.DateTimeField(required=False, allow_null=True, source='lock_until')
    isLocked = serializers.BooleanField(required=False, source='is_locked')
    password = serializers.CharField(required=False, allow_blank=False, write_only=True)

    def validate_name(self, v):
        return _clean_text(v)

    def validate_address(self, v):
        return _clean_text(v)


def user_payload(user: User) -> dict:
    return {
        'id': user.pk,
        'user_id': user.user_id,
        'name': user.name,
        'email': user.email,
        'phone': user.phone,
        'address': user.address,
        'age': user.age,
        'gender': user.gender,
        'dob': user.dob,
        'role': user.role,
        'isActive': user.is_active,
        'isLocked': user.is_locked,
        'lockUntil': user.lock_until,
        'lastLogin': user.last_login,
        'isFirstLogin': user.is_first_login,
        'createdAt': user.created_at,
        'updatedAt': user.updated_at,
    }


def user_list_payload(user: User) -> dict:
    return {
        'id': user.pk,
        'user_id': user.user_id,
        'name': user.name,
        'email': user.email,
        'role': user.role,
        'isActive': user.is_active,
        'isLocked': user.is_locked,
        'lastLogin': user.last_login,
    }


def profile_payload(profile) -> dict:
    data = model_to_dict(profile)
    data['id'] = profile.pk
    data['user'] = profile.user_id
    data['createdAt'] = profile.created_at
    data['updatedAt'] = profile.updated_at
    return data
