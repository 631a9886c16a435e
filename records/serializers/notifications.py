from rest_framework import serializers

from .fields import CleanCharField


class AppointmentReminderSerializer(serializers.Serializer):
    patientEmail = serializers.EmailField(error_messages={'required': 'Patient email required'})
    patientName = CleanCharField(max_length=128, required=False, allow_blank=True, default='')
    doctorName = CleanCharField(max_length=128, required=False, allow_blank=True, default='')
    appointmentDate = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    appointmentTime = serializers.CharField(max_length=16, required=False, allow_blank=True, default='')


class NotifiedMedicationSerializer(serializers.Serializer):
    name = CleanCharField(max_length=128, required=False, allow_blank=True)
    drugName = CleanCharField(max_length=128, required=False, allow_blank=True)
    dosage = CleanCharField(max_length=64, required=False, allow_blank=True)
    frequency = CleanCharField(max_length=64, required=False, allow_blank=True)


class PrescriptionNotificationSerializer(serializers.Serializer):
    patientEmail = serializers.EmailField(error_messages={'required': 'Patient email required'})
    patientName = CleanCharField(max_length=128, required=False, allow_blank=True, default='')
    medications = NotifiedMedicationSerializer(many=True, required=False, default=list)
