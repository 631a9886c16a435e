from __future__ import annotations

from typing import Any

from records.store import RecordStore
from .common import actor_fields, full_name, new_record_id, now_iso, require_patient

STATUSES = ('Scheduled', 'In Progress', 'Completed', 'Cancelled', 'No Show')


def appointment_key(appointment_id: str) -> str:
    return f'appointment:{appointment_id}'


def create_appointment(store: RecordStore, caller, data: dict[str, Any]) -> dict[str, Any]:
    patient = require_patient(store, data['patientId'])
    appointment = {
        **data,
        'id': new_record_id(store, 'APT', appointment_key),
        'patientName': data.get('patientName') or full_name(patient),
        'patientMrn': data.get('patientMrn') or patient.get('mrn'),
        'status': data.get('status') or 'Scheduled',
        'createdAt': now_iso(),
        **actor_fields(caller, 'created'),
    }
    store.set(appointment_key(appointment['id']), appointment)
    return appointment


def list_appointments(store: RecordStore) -> list[dict[str, Any]]:
    return store.get_by_prefix('appointment:')
