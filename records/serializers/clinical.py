from rest_framework import serializers

from records.services import appointments, lab_orders, prescriptions
from .fields import CleanCharField, optional_text


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    patientName = CleanCharField(max_length=128, required=False, allow_blank=True)
    patientMrn = serializers.CharField(max_length=32, required=False, allow_blank=True)
    doctorId = serializers.CharField(max_length=64)
    doctorName = CleanCharField(max_length=128, required=False, allow_blank=True)
    date = serializers.DateField()
    time = serializers.CharField(max_length=16)
    type = CleanCharField(max_length=64, required=False, allow_blank=True)
    department = CleanCharField(max_length=128, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=appointments.STATUSES, required=False)
    reason = optional_text()
    notes = optional_text()

    def validate_date(self, v):
        return v.isoformat()


class VitalsCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    patientName = CleanCharField(max_length=128, required=False, allow_blank=True)
    bloodPressure = serializers.CharField(max_length=16, required=False, allow_blank=True)
    temperature = serializers.CharField(max_length=16, required=False, allow_blank=True)
    pulse = serializers.CharField(max_length=16, required=False, allow_blank=True)
    respiratoryRate = serializers.CharField(max_length=16, required=False, allow_blank=True)
    oxygenSaturation = serializers.CharField(max_length=16, required=False, allow_blank=True)
    weight = serializers.CharField(max_length=16, required=False, allow_blank=True)
    height = serializers.CharField(max_length=16, required=False, allow_blank=True)
    bmi = serializers.CharField(max_length=16, required=False, allow_blank=True)
    notes = optional_text()


class LabOrderCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    patientName = CleanCharField(max_length=128, required=False, allow_blank=True)
    testType = CleanCharField(max_length=128)
    priority = serializers.ChoiceField(choices=lab_orders.PRIORITIES, required=False)
    status = serializers.ChoiceField(choices=lab_orders.STATUSES, required=False)
    notes = optional_text()


class LabOrderUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=lab_orders.STATUSES, required=False)
    result = optional_text(max_length=10000)
    priority = serializers.ChoiceField(choices=lab_orders.PRIORITIES, required=False)
    notes = optional_text()
    completedDate = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if 'completedDate' in attrs:
            attrs['completedAt'] = attrs.pop('completedDate').isoformat()
        return attrs


class MedicationSerializer(serializers.Serializer):
    drugName = CleanCharField(max_length=128)
    dosage = CleanCharField(max_length=64)
    frequency = CleanCharField(max_length=64, required=False, allow_blank=True)
    duration = CleanCharField(max_length=64, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    instructions = optional_text(max_length=500)
    dispensed = serializers.BooleanField(required=False, default=False)


class PrescriptionCreateSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    patientName = CleanCharField(max_length=128, required=False, allow_blank=True)
    medications = MedicationSerializer(many=True, allow_empty=False)
    status = serializers.ChoiceField(choices=('Pending', 'Active'), required=False)
    notes = optional_text()


class PrescriptionUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=prescriptions.STATUSES, required=False)
    medications = MedicationSerializer(many=True, required=False, allow_empty=False)
    notes = optional_text()
