from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from records.backends import get_backends
from records.services.setup import create_default_admin


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def setup_init(request):
    """Create the default administrator; a no-op once it exists."""
    b = get_backends()
    result = create_default_admin(b.identity, b.store)
    return Response(result)
