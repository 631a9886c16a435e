"""
Admin dashboard figures.

These are presentation aggregates computed from the current records on
each request; nothing here is stored.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.services import dashboard


@api_view(['GET'])
@permission_classes([IsAuthenticated, allows(GET=Operation.VIEW_DASHBOARD)])
def dashboard_stats(request):
    return Response({'success': True, 'stats': dashboard.summary(get_backends().store)})
