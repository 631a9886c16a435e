"""
Explicit notification triggers.

The email is sent synchronously so the caller learns whether it went
out; a failed delivery is reported as ``success: false`` and nothing
else is affected.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.notifications import AppointmentReminderSerializer, PrescriptionNotificationSerializer
from records.services import notifications


def _delivery_response(delivery, message):
    if delivery.success:
        return Response({'success': True, 'message': message})
    return Response({'success': False, 'error': delivery.error}, status=400)


@api_view(['POST'])
@permission_classes([IsAuthenticated, allows(POST=Operation.SEND_NOTIFICATION)])
def appointment_reminder(request):
    s = AppointmentReminderSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    subject, html = notifications.appointment_reminder(
        patient_name=vd['patientName'],
        doctor_name=vd['doctorName'],
        appointment_date=vd['appointmentDate'],
        appointment_time=vd['appointmentTime'],
    )
    delivery = get_backends().notifier.send(vd['patientEmail'], subject, html)
    return _delivery_response(delivery, 'Reminder sent successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated, allows(POST=Operation.SEND_NOTIFICATION)])
def prescription_notification(request):
    s = PrescriptionNotificationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    subject, html = notifications.prescription_ready(patient_name=vd['patientName'], medications=vd['medications'])
    delivery = get_backends().notifier.send(vd['patientEmail'], subject, html)
    return _delivery_response(delivery, 'Notification sent successfully')
