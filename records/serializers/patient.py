from rest_framework import serializers

from .fields import CleanCharField, optional_text


class ListOrCSVField(serializers.Field):
    """Accepts ``"a, b"`` or ``["a", "b"]``."""

    def to_internal_value(self, data):
        if data in (None, ''):
            return []
        if isinstance(data, str):
            data = data.split(',')
        if not isinstance(data, (list, tuple)):
            raise serializers.ValidationError('Expected a list or a comma separated string')
        return [str(v).strip() for v in data if str(v).strip()]

    def to_representation(self, value):
        return value


class PatientCreateSerializer(serializers.Serializer):
    firstName = CleanCharField(max_length=64)
    lastName = CleanCharField(max_length=64)
    phone = serializers.CharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    dateOfBirth = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    gender = serializers.CharField(max_length=16, required=False, allow_blank=True, allow_null=True)
    address = optional_text(max_length=255)
    nextOfKin = optional_text(max_length=128)
    nextOfKinPhone = serializers.CharField(max_length=32, required=False, allow_blank=True, allow_null=True)
    insuranceProvider = optional_text(max_length=128)
    insuranceNumber = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    bloodGroup = serializers.ChoiceField(
        choices=['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-'],
        required=False, allow_blank=True, allow_null=True,
    )
    allergies = ListOrCSVField(required=False)
    chronicConditions = ListOrCSVField(required=False)
