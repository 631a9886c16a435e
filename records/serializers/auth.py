from rest_framework import serializers

from records.policy import STAFF_ROLES
from .fields import CleanCharField

STAFF_ROLE_CHOICES = sorted(r.value for r in STAFF_ROLES)


class SignInSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Email and password required')
        return v


class StaffCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, trim_whitespace=False)
    firstName = CleanCharField(max_length=64)
    lastName = CleanCharField(max_length=64)
    role = serializers.ChoiceField(choices=STAFF_ROLE_CHOICES, error_messages={'invalid_choice': 'Invalid role'})
    department = CleanCharField(max_length=128, required=False, allow_blank=True, default='')
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')


class StaffUpdateSerializer(serializers.Serializer):
    firstName = CleanCharField(max_length=64, required=False)
    lastName = CleanCharField(max_length=64, required=False)
    department = CleanCharField(max_length=128, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=['active', 'inactive', 'suspended'], required=False)
