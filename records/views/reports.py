"""
Medical report endpoints.

Upload is limited to clinical staff and admins, deletion to doctors and
admins.  Any staff member may list a patient's reports; a patient may
list only their own.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation, can_read_reports
from records.serializers.reports import ReportUploadSerializer
from records.services import reports as service


@api_view(['POST'])
@permission_classes([IsAuthenticated, allows(POST=Operation.UPLOAD_REPORT)])
def upload_report(request):
    s = ReportUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    b = get_backends()
    report = service.upload_report(b.store, b.files, request.user, **s.validated_data)
    return Response({'success': True, 'report': report})


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.READ_REPORTS)])
def patient_reports(request, patient_id: str):
    if not can_read_reports(request.user.role, request.user.id, patient_id):
        raise PermissionDenied("Forbidden: cannot access other patients' records")
    b = get_backends()
    return Response({'success': True, 'reports': service.patient_reports(b.store, b.files, patient_id)})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, allows(DELETE=Operation.DELETE_REPORT)])
def report_detail(request, report_id: str):
    b = get_backends()
    service.delete_report(b.store, b.files, report_id)
    return Response({'success': True, 'message': 'Medical report deleted successfully'})
