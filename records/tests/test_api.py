"""
End-to-end behaviour of the HTTP API.

Requests go through the full DRF stack (bearer authentication, policy
permission classes, serializers, exception handler) with the external
services replaced by the fakes from ``conftest``.
"""
import re

import pytest
from rest_framework.test import APIClient

from records.exceptions import StorageError
from records.models import KVEntry

pytestmark = pytest.mark.django_db

MRN_PATTERN = re.compile(r'^MRN\d{4}\d{5}$')

PROTECTED_ROUTES = [
    ('post', '/auth/create-staff'),
    ('post', '/auth/create-patient'),
    ('get', '/staff'),
    ('patch', '/staff/s1'),
    ('get', '/patients'),
    ('get', '/patients/p1'),
    ('get', '/patients/mrn/MRN202500001'),
    ('get', '/appointments'),
    ('post', '/appointments'),
    ('get', '/vitals'),
    ('post', '/vitals'),
    ('get', '/vitals/patient/p1'),
    ('get', '/lab-orders'),
    ('post', '/lab-orders'),
    ('patch', '/lab-orders/LAB1'),
    ('get', '/prescriptions'),
    ('post', '/prescriptions'),
    ('patch', '/prescriptions/RX1'),
    ('get', '/consultations'),
    ('post', '/consultations'),
    ('patch', '/consultations/CONS1'),
    ('get', '/consultations/patient/p1'),
    ('post', '/medical-reports/upload'),
    ('get', '/medical-reports/patient/p1'),
    ('delete', '/medical-reports/RPT1'),
    ('post', '/reminders/appointment'),
    ('post', '/notifications/prescription'),
    ('get', '/dashboard/stats'),
]


# ---------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------
@pytest.mark.parametrize('method,path', PROTECTED_ROUTES)
def test_missing_token_is_401_without_mutation(backends, anon, method, path):
    before = KVEntry.objects.count()
    r = getattr(anon, method)(path, {'patientId': 'p1', 'firstName': 'A', 'lastName': 'B', 'phone': '1'}, format='json')
    assert r.status_code == 401
    assert set(r.data) == {'error'}
    assert r['WWW-Authenticate'] == 'Bearer'
    assert KVEntry.objects.count() == before


def test_unknown_token_is_401(backends, anon):
    anon.credentials(HTTP_AUTHORIZATION='Bearer not-a-real-token')
    r = anon.get('/patients')
    assert r.status_code == 401
    assert r.data == {'error': 'Invalid or expired token'}


def test_malformed_authorization_header_is_401(backends, anon):
    anon.credentials(HTTP_AUTHORIZATION='Token abc')
    r = anon.get('/patients')
    assert r.status_code == 401


def test_health_needs_no_token(backends, anon):
    r = anon.get('/health')
    assert r.status_code == 200
    assert r.data['status'] == 'ok'
    assert r.data['store'] is True
    assert r.data['timestamp']


# ---------------------------------------------------------------------
# Patients
# ---------------------------------------------------------------------
def test_registrar_creates_patient(client_for, store):
    client, _ = client_for('registrar')
    r = client.post('/auth/create-patient', {'firstName': 'Jane', 'lastName': 'Doe', 'phone': '555-0100'}, format='json')
    assert r.status_code == 200, r.data
    assert r.data['success'] is True
    patient = r.data['patient']
    assert MRN_PATTERN.match(patient['mrn'])
    assert patient['temporaryPassword']
    assert patient['name'] == 'Jane Doe'

    listed = client.get('/patients')
    assert listed.data['success'] is True
    assert patient['id'] in [p['id'] for p in listed.data['patients']]
    # the MRN mapping is not itself listed as a patient
    assert all(isinstance(p, dict) for p in listed.data['patients'])
    assert store.get(f"patient:mrn:{patient['mrn']}") == patient['id']


def test_create_patient_accepts_wrapped_body(client_for):
    client, _ = client_for('admin')
    r = client.post('/auth/create-patient', {
        'patientData': {
            'firstName': 'John',
            'lastName': 'Smith',
            'phone': '555-0101',
            'allergies': 'penicillin, latex',
            'bloodGroup': 'O+',
        },
    }, format='json')
    assert r.status_code == 200, r.data
    detail = client.get(f"/patients/{r.data['patient']['id']}")
    assert detail.data['patient']['allergies'] == ['penicillin', 'latex']
    assert detail.data['patient']['bloodGroup'] == 'O+'
    assert detail.data['patient']['email'].endswith('@patient.opalhospital.com')


def test_patients_get_distinct_mrns(client_for):
    client, _ = client_for('registrar')
    mrns = set()
    for i in range(3):
        r = client.post('/auth/create-patient', {'firstName': f'P{i}', 'lastName': 'X', 'phone': '1'}, format='json')
        assert r.status_code == 200
        mrns.add(r.data['patient']['mrn'])
    assert len(mrns) == 3


def test_create_patient_requires_phone(client_for):
    client, _ = client_for('registrar')
    r = client.post('/auth/create-patient', {'firstName': 'Jane', 'lastName': 'Doe'}, format='json')
    assert r.status_code == 400
    assert r.data['error'].startswith('phone:')


@pytest.mark.parametrize('role', ['doctor', 'nurse', 'lab_tech', 'pharmacist', 'patient'])
def test_only_registrar_or_admin_creates_patients(client_for, role):
    client, _ = client_for(role)
    r = client.post('/auth/create-patient', {'firstName': 'Jane', 'lastName': 'Doe', 'phone': '1'}, format='json')
    assert r.status_code == 403
    assert r.data == {'error': 'Forbidden: insufficient permissions'}


def test_failed_record_write_removes_new_account(client_for, backends, monkeypatch):
    client, _ = client_for('registrar')

    def failing_mset(mapping):
        raise StorageError('disk full')

    monkeypatch.setattr(backends.store, 'mset', failing_mset)
    r = client.post('/auth/create-patient', {'firstName': 'Jane', 'lastName': 'Doe', 'phone': '1'}, format='json')
    assert r.status_code == 500
    assert r.data == {'error': 'Internal server error'}
    assert len(backends.identity.deleted) == 1
    assert backends.identity.accounts == {}


def test_patient_lookup(client_for, patient_record):
    client, _ = client_for('doctor')
    assert client.get('/patients/pat-1').data['patient']['firstName'] == 'Jane'
    assert client.get('/patients/mrn/mrn202512345').data['patient']['id'] == 'pat-1'

    missing = client.get('/patients/nobody')
    assert missing.status_code == 404
    assert missing.data == {'error': 'Patient not found'}
    assert client.get('/patients/mrn/MRN200000000').status_code == 404


# ---------------------------------------------------------------------
# Staff and sign-in
# ---------------------------------------------------------------------
STAFF = {
    'email': 'joy@opal.test',
    'password': 'secret123',
    'firstName': 'Joy',
    'lastName': 'Nurse',
    'role': 'nurse',
    'department': 'Emergency',
}


def test_admin_creates_staff_and_staff_signs_in(admin, anon, store):
    r = admin.post('/auth/create-staff', STAFF, format='json')
    assert r.status_code == 200, r.data
    assert r.data['success'] is True
    assert r.data['user']['role'] == 'nurse'
    assert r.data['user']['name'] == 'Joy Nurse'
    assert store.get(f"staff:{r.data['user']['id']}")['department'] == 'Emergency'

    s = anon.post('/auth/signin', {'email': STAFF['email'], 'password': STAFF['password']}, format='json')
    assert s.status_code == 200, s.data
    assert s.data['success'] is True
    assert s.data['session']['access_token']
    assert s.data['user']['role'] == 'nurse'
    assert s.data['user']['additionalData']['email'] == STAFF['email']

    anon.credentials(HTTP_AUTHORIZATION=f"Bearer {s.data['session']['access_token']}")
    assert anon.get('/staff').status_code == 200


def test_signin_with_wrong_password(admin, anon):
    admin.post('/auth/create-staff', STAFF, format='json')
    r = anon.post('/auth/signin', {'email': STAFF['email'], 'password': 'nope'}, format='json')
    assert r.status_code == 401
    assert r.data == {'error': 'Invalid credentials'}


def test_signin_requires_fields(backends, anon):
    r = anon.post('/auth/signin', {'email': 'x@opal.test'}, format='json')
    assert r.status_code == 400


def test_create_staff_rejects_unknown_role(admin):
    r = admin.post('/auth/create-staff', {**STAFF, 'role': 'superuser'}, format='json')
    assert r.status_code == 400
    assert r.data == {'error': 'role: Invalid role'}


def test_create_staff_cannot_create_patients(admin):
    r = admin.post('/auth/create-staff', {**STAFF, 'role': 'patient'}, format='json')
    assert r.status_code == 400


def test_duplicate_staff_email_is_rejected(admin):
    assert admin.post('/auth/create-staff', STAFF, format='json').status_code == 200
    r = admin.post('/auth/create-staff', STAFF, format='json')
    assert r.status_code == 400
    assert 'already been registered' in r.data['error']


def test_only_admin_creates_staff(client_for):
    client, _ = client_for('registrar')
    assert client.post('/auth/create-staff', STAFF, format='json').status_code == 403


def test_staff_update_is_admin_only_and_keeps_role(admin, client_for, store):
    staff_id = admin.post('/auth/create-staff', STAFF, format='json').data['user']['id']

    r = admin.patch(f'/staff/{staff_id}', {'department': 'ICU', 'status': 'inactive', 'role': 'admin'}, format='json')
    assert r.status_code == 200, r.data
    record = store.get(f'staff:{staff_id}')
    assert record['department'] == 'ICU'
    assert record['status'] == 'inactive'
    assert record['role'] == 'nurse'

    doctor, _ = client_for('doctor')
    assert doctor.patch(f'/staff/{staff_id}', {'department': 'X'}, format='json').status_code == 403
    assert doctor.get('/staff').status_code == 200


def test_update_unknown_staff_is_404(admin):
    assert admin.patch('/staff/ghost', {'department': 'ICU'}, format='json').status_code == 404


# ---------------------------------------------------------------------
# Clinical records
# ---------------------------------------------------------------------
def test_appointment_create_and_list(client_for, patient_record):
    client, user = client_for('registrar', name='Rita Registrar')
    r = client.post('/appointments', {
        'patientId': 'pat-1',
        'doctorId': 'doc-1',
        'doctorName': 'Dr. House',
        'date': '2025-06-01',
        'time': '09:30',
    }, format='json')
    assert r.status_code == 200, r.data
    appointment = r.data['appointment']
    assert appointment['id'].startswith('APT')
    assert appointment['status'] == 'Scheduled'
    assert appointment['patientName'] == 'Jane Doe'
    assert appointment['patientMrn'] == 'MRN202512345'
    assert appointment['createdBy'] == user.id

    listed = client.get('/appointments')
    assert [a['id'] for a in listed.data['appointments']] == [appointment['id']]


def test_appointment_for_unknown_patient_is_404(client_for, backends):
    client, _ = client_for('doctor')
    r = client.post('/appointments', {'patientId': 'ghost', 'doctorId': 'd', 'date': '2025-06-01', 'time': '10:00'},
                    format='json')
    assert r.status_code == 404
    assert backends.store.get_by_prefix('appointment:') == []


def test_appointment_status_must_be_known(client_for, patient_record):
    client, _ = client_for('doctor')
    r = client.post('/appointments', {'patientId': 'pat-1', 'doctorId': 'd', 'date': '2025-06-01', 'time': '10:00',
                                      'status': 'Teleported'}, format='json')
    assert r.status_code == 400
    assert r.data['error'].startswith('status:')


def test_vitals_are_stored_twice_with_bmi(client_for, store, patient_record):
    client, user = client_for('nurse', name='Joy Nurse')
    r = client.post('/vitals', {
        'patientId': 'pat-1',
        'bloodPressure': '120/80',
        'temperature': '98.6°F',
        'weight': '70',
        'height': '175',
    }, format='json')
    assert r.status_code == 200, r.data
    vital = r.data['vital']
    assert vital['bmi'] == '22.9'
    assert vital['recordedByName'] == 'Joy Nurse'
    assert store.get(f"vital:{vital['id']}") == store.get(f"vital:patient:pat-1:{vital['id']}")

    assert [v['id'] for v in client.get('/vitals').data['vitals']] == [vital['id']]
    assert [v['id'] for v in client.get('/vitals/patient/pat-1').data['vitals']] == [vital['id']]
    assert client.get('/vitals/patient/someone-else').data['vitals'] == []


def test_lab_order_completed_by_lab_tech(client_for, patient_record):
    doctor, _ = client_for('doctor')
    created = doctor.post('/lab-orders', {'patientId': 'pat-1', 'testType': 'Full Blood Count', 'priority': 'Urgent'},
                          format='json')
    assert created.status_code == 200, created.data
    order = created.data['labOrder']
    assert order['status'] == 'Pending'

    tech, _ = client_for('lab_tech')
    r = tech.patch(f"/lab-orders/{order['id']}", {'status': 'Completed', 'result': 'Negative'}, format='json')
    assert r.status_code == 200, r.data

    stored = next(o for o in tech.get('/lab-orders').data['labOrders'] if o['id'] == order['id'])
    assert stored['status'] == 'Completed'
    assert stored['result'] == 'Negative'
    assert stored['completedAt']


def test_patch_unknown_lab_order_is_404(client_for, backends):
    client, _ = client_for('lab_tech')
    r = client.patch('/lab-orders/LAB0', {'status': 'Processing'}, format='json')
    assert r.status_code == 404
    assert r.data == {'error': 'Lab order not found'}


def test_prescription_create(client_for, patient_record):
    client, user = client_for('doctor', name='Dr. Grey')
    r = client.post('/prescriptions', {
        'patientId': 'pat-1',
        'medications': [{'drugName': 'Amoxicillin', 'dosage': '500mg', 'frequency': 'TID', 'duration': '7 days'}],
    }, format='json')
    assert r.status_code == 200, r.data
    rx = r.data['prescription']
    assert rx['status'] == 'Active'
    assert rx['prescribedByName'] == 'Dr. Grey'
    assert rx['medications'][0]['dispensed'] is False
    assert client.get('/prescriptions').data['prescriptions'][0]['id'] == rx['id']


def test_prescription_needs_medications(client_for, patient_record):
    client, _ = client_for('doctor')
    r = client.post('/prescriptions', {'patientId': 'pat-1', 'medications': []}, format='json')
    assert r.status_code == 400


def test_consultation_update_keeps_copies_identical(client_for, store, patient_record):
    client, _ = client_for('doctor')
    created = client.post('/consultations', {
        'patientId': 'pat-1',
        'doctorName': 'Dr. House',
        'appointmentDate': '2025-06-02',
        'appointmentTime': '11:00',
    }, format='json')
    assert created.status_code == 200, created.data
    cid = created.data['consultation']['id']
    assert created.data['consultation']['status'] == 'scheduled'
    assert 'notification' not in created.data

    r = client.patch(f'/consultations/{cid}', {'status': 'completed', 'diagnosis': 'Common cold'}, format='json')
    assert r.status_code == 200, r.data
    primary = store.get(f'consultation:{cid}')
    assert primary['status'] == 'completed'
    assert primary == store.get(f'consultation:patient:pat-1:{cid}')

    assert [c['id'] for c in client.get('/consultations').data['consultations']] == [cid]
    by_patient = client.get('/consultations/patient/pat-1').data['consultations']
    assert by_patient[0]['diagnosis'] == 'Common cold'


def test_dashboard_stats_admin_only(admin, client_for, patient_record):
    r = admin.get('/dashboard/stats')
    assert r.status_code == 200
    assert r.data['success'] is True
    assert r.data['stats']['patients'] == 1

    doctor, _ = client_for('doctor')
    assert doctor.get('/dashboard/stats').status_code == 403


def test_signin_ignores_anon_key_bearer_header(admin, backends):
    admin.post('/auth/create-staff', STAFF, format='json')
    client = APIClient()
    # the login page always sends the project's public anon key
    client.credentials(HTTP_AUTHORIZATION='Bearer public-anon-key')
    r = client.post('/auth/signin', {'email': STAFF['email'], 'password': STAFF['password']}, format='json')
    assert r.status_code == 200, r.data
    assert r.data['user']['role'] == 'nurse'


def test_signin_with_live_session_header(admin):
    admin.post('/auth/create-staff', STAFF, format='json')
    r = admin.post('/auth/signin', {'email': STAFF['email'], 'password': STAFF['password']}, format='json')
    assert r.status_code == 200, r.data
    assert r.data['session']['access_token']


def test_caller_identity_exposes_pk(client_for):
    _, user = client_for('doctor', user_id='doc-7')
    assert user.pk == 'doc-7'
