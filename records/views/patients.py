from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.services import patients


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.READ_PATIENTS)])
def patients_list(request):
    return Response({'success': True, 'patients': patients.list_patients(get_backends().store)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.READ_PATIENTS)])
def patient_detail(request, patient_id: str):
    return Response({'success': True, 'patient': patients.get_patient(get_backends().store, patient_id)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.READ_PATIENTS)])
def patient_by_mrn(request, mrn: str):
    patient = patients.find_by_mrn(get_backends().store, mrn)
    if patient is None:
        raise NotFound('Patient not found')
    return Response({'success': True, 'patient': patient})
