from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.clinical import LabOrderCreateSerializer, LabOrderUpdateSerializer
from records.services import lab_orders as service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, allows(GET=Operation.LIST_LAB_ORDERS, POST=Operation.CREATE_LAB_ORDER)])
def lab_orders(request):
    store = get_backends().store
    if request.method == 'GET':
        return Response({'success': True, 'labOrders': service.list_lab_orders(store)})
    s = LabOrderCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    order = service.create_lab_order(store, request.user, s.validated_data)
    return Response({'success': True, 'labOrder': order})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, allows(PATCH=Operation.UPDATE_LAB_ORDER)])
def lab_order_detail(request, order_id: str):
    s = LabOrderUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    order = service.update_lab_order(get_backends().store, request.user, order_id, s.validated_data)
    return Response({'success': True, 'labOrder': order})
