from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.clinical import AppointmentCreateSerializer
from records.services import appointments as service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, allows(GET=Operation.LIST_APPOINTMENTS, POST=Operation.CREATE_APPOINTMENT)])
def appointments(request):
    store = get_backends().store
    if request.method == 'GET':
        return Response({'success': True, 'appointments': service.list_appointments(store)})
    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = service.create_appointment(store, request.user, s.validated_data)
    return Response({'success': True, 'appointment': appointment})
