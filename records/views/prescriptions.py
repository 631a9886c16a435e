from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.clinical import PrescriptionCreateSerializer, PrescriptionUpdateSerializer
from records.services import prescriptions as service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, allows(GET=Operation.LIST_PRESCRIPTIONS, POST=Operation.CREATE_PRESCRIPTION)])
def prescriptions(request):
    store = get_backends().store
    if request.method == 'GET':
        return Response({'success': True, 'prescriptions': service.list_prescriptions(store)})
    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    prescription = service.create_prescription(store, request.user, s.validated_data)
    return Response({'success': True, 'prescription': prescription})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, allows(PATCH=Operation.UPDATE_PRESCRIPTION)])
def prescription_detail(request, prescription_id: str):
    """Change status and/or dispense line items."""
    s = PrescriptionUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    prescription = service.update_prescription(get_backends().store, request.user, prescription_id, s.validated_data)
    return Response({'success': True, 'prescription': prescription})
