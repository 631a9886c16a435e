"""
Patient registration and lookup.

A patient record lives at ``patient:<id>`` where ``<id>`` is the
identity-provider user id.  The medical record number (MRN) is a
separate, patient-facing identifier, resolvable through the mapping
``patient:mrn:<mrn> -> <id>`` which is written in the same transaction
as the record it points to.
"""
from __future__ import annotations

import secrets
from typing import Any, Optional

from django.conf import settings
from django.utils import timezone

from records.exceptions import RecordNotFound
from records.store import RecordStore
from .accounts import provision_account
from .common import now_iso

MRN_ATTEMPTS = 20

PROFILE_FIELDS = (
    'dateOfBirth', 'gender', 'address', 'nextOfKin', 'nextOfKinPhone',
    'insuranceProvider', 'insuranceNumber', 'bloodGroup',
)


def patient_key(patient_id: str) -> str:
    return f'patient:{patient_id}'


def mrn_key(mrn: str) -> str:
    return f'patient:mrn:{mrn}'


def generate_mrn(store: RecordStore) -> str:
    """``MRN<year><5 random digits>``, re-drawn while already assigned."""
    year = timezone.now().year
    for _ in range(MRN_ATTEMPTS):
        mrn = f'MRN{year}{secrets.randbelow(100000):05d}'
        if store.get(mrn_key(mrn)) is None:
            return mrn
    raise RuntimeError('could not allocate an unused MRN')


def _as_list(value) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [str(v).strip() for v in value if str(v).strip()]


def create_patient(identity, store: RecordStore, caller, data: dict[str, Any]) -> dict[str, Any]:
    mrn = generate_mrn(store)
    email = data.get('email') or f'{mrn.lower()}@{settings.PATIENT_EMAIL_DOMAIN}'
    password = secrets.token_urlsafe(12)
    first, last = data['firstName'], data['lastName']
    metadata = {
        'firstName': first,
        'lastName': last,
        'role': 'patient',
        'name': f'{first} {last}',
        'mrn': mrn,
    }

    def persist(user):
        record = {
            'id': user.id,
            'mrn': mrn,
            'firstName': first,
            'lastName': last,
            'phone': data['phone'],
            'email': email,
            **{f: data.get(f) for f in PROFILE_FIELDS},
            'allergies': _as_list(data.get('allergies')),
            'chronicConditions': _as_list(data.get('chronicConditions')),
            'registrationDate': now_iso(),
            'registeredBy': caller.id,
            'status': 'active',
        }
        store.mset({patient_key(user.id): record, mrn_key(mrn): user.id})
        return {
            'id': user.id,
            'mrn': mrn,
            'email': email,
            'temporaryPassword': password,
            'name': f'{first} {last}',
        }

    return provision_account(identity, email=email, password=password, metadata=metadata, persist=persist)


def list_patients(store: RecordStore) -> list[dict[str, Any]]:
    mapping = mrn_key('')
    return [v for k, v in store.items_by_prefix('patient:') if not k.startswith(mapping)]


def get_patient(store: RecordStore, patient_id: str) -> dict[str, Any]:
    patient = store.get(patient_key(patient_id))
    if patient is None:
        raise RecordNotFound('Patient not found')
    return patient


def find_by_mrn(store: RecordStore, mrn: str) -> Optional[dict[str, Any]]:
    patient_id = store.get(mrn_key(mrn.upper()))
    if patient_id is None:
        return None
    patient = store.get(patient_key(patient_id))
    if patient is None or patient.get('mrn') != mrn.upper():
        return None
    return patient
