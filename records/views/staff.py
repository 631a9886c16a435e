from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.auth import StaffUpdateSerializer
from records.services import staff


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.LIST_STAFF)])
def staff_list(request):
    return Response({'success': True, 'staff': staff.list_staff(get_backends().store)})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, allows(PATCH=Operation.UPDATE_STAFF)])
def staff_detail(request, staff_id: str):
    s = StaffUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    updated = staff.update_staff(get_backends().store, staff_id, s.validated_data)
    return Response({'success': True, 'staff': updated})
