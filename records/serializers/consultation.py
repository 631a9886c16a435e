from rest_framework import serializers

from records.services import consultations
from .fields import CleanCharField, optional_text


class ConsultationCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    patientName = CleanCharField(max_length=128, required=False, allow_blank=True)
    patientEmail = serializers.EmailField(required=False, allow_blank=True)
    doctorId = serializers.CharField(max_length=64, required=False, allow_blank=True)
    doctorName = CleanCharField(max_length=128)
    appointmentDate = serializers.DateField()
    appointmentTime = serializers.CharField(max_length=16)
    department = CleanCharField(max_length=128, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=consultations.STATUSES, required=False)
    notes = optional_text(max_length=10000)

    def validate_appointmentDate(self, v):
        return v.isoformat()


class ConsultationUpdateSerializer(serializers.Serializer):
    doctorName = CleanCharField(max_length=128, required=False)
    appointmentDate = serializers.DateField(required=False)
    appointmentTime = serializers.CharField(max_length=16, required=False)
    department = CleanCharField(max_length=128, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=consultations.STATUSES, required=False)
    diagnosis = optional_text(max_length=10000)
    notes = optional_text(max_length=10000)

    def validate_appointmentDate(self, v):
        return v.isoformat()
