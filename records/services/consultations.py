"""
Consultations.

Stored under ``consultation:<id>`` and, with identical content, under
``consultation:patient:<patientId>:<id>``.  Creation and every update go
through :func:`save_indexed` so the two copies never disagree.  When the
patient's email is known a confirmation is queued for background
delivery; whether it could be queued is reported alongside the record
but never affects the write.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from records.exceptions import RecordNotFound
from records.store import RecordStore
from . import notifications
from .common import actor_fields, full_name, new_record_id, now_iso, patient_scope, primary_records, require_patient, save_indexed

logger = logging.getLogger(__name__)

STATUSES = ('scheduled', 'in-progress', 'completed', 'cancelled', 'no-show')


def consultation_key(consultation_id: str) -> str:
    return f'consultation:{consultation_id}'


def _keys(record: dict[str, Any]) -> list[str]:
    return [consultation_key(record['id']), patient_scope('consultation', record['patientId']) + record['id']]


def create_consultation(store: RecordStore, notifier, caller,
                        data: dict[str, Any]) -> tuple[dict[str, Any], Optional[dict[str, bool]]]:
    """Store a consultation; returns it with the email outcome (``None`` when no email is known)."""
    patient = require_patient(store, data['patientId'])
    consultation = {
        **data,
        'id': new_record_id(store, 'CONS', consultation_key),
        'patientName': data.get('patientName') or full_name(patient),
        'status': data.get('status') or 'scheduled',
        'createdAt': now_iso(),
        **actor_fields(caller, 'created'),
    }
    save_indexed(store, consultation, _keys(consultation))

    if not consultation.get('patientEmail'):
        return consultation, None
    subject, html = notifications.consultation_scheduled(consultation)
    queued = notifier.dispatch(consultation['patientEmail'], subject, html)
    return consultation, {'queued': queued}


def list_consultations(store: RecordStore) -> list[dict[str, Any]]:
    return primary_records(store, 'consultation')


def patient_consultations(store: RecordStore, patient_id: str) -> list[dict[str, Any]]:
    return store.get_by_prefix(patient_scope('consultation', patient_id))


def update_consultation(store: RecordStore, caller, consultation_id: str, changes: dict[str, Any]) -> dict[str, Any]:
    consultation = store.get(consultation_key(consultation_id))
    if consultation is None:
        raise RecordNotFound('Consultation not found')
    # the patient-scoped key depends on patientId, so it cannot be moved here
    changes = {k: v for k, v in changes.items() if k not in ('id', 'patientId')}
    updated = {**consultation, **changes, 'updatedAt': now_iso(), 'updatedBy': caller.id}
    return save_indexed(store, updated, _keys(updated))
