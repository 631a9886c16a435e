from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.clinical import VitalsCreateSerializer
from records.services import vitals as service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, allows(GET=Operation.READ_VITALS, POST=Operation.RECORD_VITALS)])
def vitals(request):
    store = get_backends().store
    if request.method == 'GET':
        return Response({'success': True, 'vitals': service.list_vitals(store)})
    s = VitalsCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vital = service.record_vitals(store, request.user, s.validated_data)
    return Response({'success': True, 'vital': vital})


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.READ_VITALS)])
def patient_vitals(request, patient_id: str):
    return Response({'success': True, 'vitals': service.patient_vitals(get_backends().store, patient_id)})
