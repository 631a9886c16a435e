from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.consultation import ConsultationCreateSerializer, ConsultationUpdateSerializer
from records.services import consultations as service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, allows(GET=Operation.LIST_CONSULTATIONS, POST=Operation.CREATE_CONSULTATION)])
def consultations(request):
    b = get_backends()
    if request.method == 'GET':
        return Response({'success': True, 'consultations': service.list_consultations(b.store)})
    s = ConsultationCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    consultation, notification = service.create_consultation(b.store, b.notifier, request.user, s.validated_data)
    body = {'success': True, 'consultation': consultation}
    if notification is not None:
        body['notification'] = notification
    return Response(body)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, allows(PATCH=Operation.UPDATE_CONSULTATION)])
def consultation_detail(request, consultation_id: str):
    s = ConsultationUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    consultation = service.update_consultation(get_backends().store, request.user, consultation_id, s.validated_data)
    return Response({'success': True, 'consultation': consultation})


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.LIST_CONSULTATIONS)])
def patient_consultations(request, patient_id: str):
    return Response({'success': True, 'consultations': service.patient_consultations(get_backends().store, patient_id)})
