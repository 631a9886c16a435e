"""
Account endpoints: staff and patient provisioning, sign-in.

Accounts are created in the identity provider (which holds the role
metadata used for every later authorization decision) and mirrored as
domain records in the record store.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from records.backends import get_backends
from records.permissions import allows
from records.policy import Operation
from records.serializers.auth import SignInSerializer, StaffCreateSerializer
from records.serializers.patient import PatientCreateSerializer
from records.services import accounts, patients, staff


@api_view(['POST'])
@permission_classes([IsAuthenticated, allows(POST=Operation.CREATE_STAFF)])
def create_staff(request):
    s = StaffCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    b = get_backends()
    user = staff.create_staff(b.identity, b.store, request.user, **s.validated_data)
    return Response({'success': True, 'user': user})


@api_view(['POST'])
@permission_classes([IsAuthenticated, allows(POST=Operation.CREATE_PATIENT)])
def create_patient(request):
    """Register a patient: MRN, login with a temporary password, and record.

    The body is either ``{"patientData": {...}}`` or the fields themselves.
    """
    payload = request.data.get('patientData') if isinstance(request.data.get('patientData'), dict) else request.data
    s = PatientCreateSerializer(data=payload)
    s.is_valid(raise_exception=True)
    b = get_backends()
    patient = patients.create_patient(b.identity, b.store, request.user, s.validated_data)
    return Response({'success': True, 'patient': patient})


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def signin(request):
    s = SignInSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    b = get_backends()
    result = accounts.sign_in(b.identity, b.store, s.validated_data['email'], s.validated_data['password'])
    if result is None:
        return Response({'error': 'Invalid credentials'}, status=401)
    return Response({'success': True, **result})


# ScopedRateThrottle reads throttle_scope from the wrapped view class
signin.cls.throttle_scope = 'signin'
