"""
Prescriptions and dispensing.

A prescription carries an ordered list of medication line items, each
with its own ``dispensed`` flag.  Status moves from ``Pending``/``Active``
through ``Partially Dispensed`` to ``Dispensed``; ``Cancelled`` is
reachable until the prescription is fully dispensed.
"""
from __future__ import annotations

from typing import Any, Optional

from rest_framework.exceptions import ValidationError

from records.exceptions import RecordNotFound
from records.store import RecordStore
from .common import actor_fields, check_transition, full_name, new_record_id, now_iso, require_patient

STATUSES = ('Pending', 'Active', 'Partially Dispensed', 'Dispensed', 'Cancelled')
RANKS = {'Pending': 0, 'Active': 0, 'Partially Dispensed': 1, 'Dispensed': 2, 'Cancelled': 2}
TERMINAL = frozenset({'Dispensed', 'Cancelled'})


def prescription_key(prescription_id: str) -> str:
    return f'prescription:{prescription_id}'


def _line_item(item: dict[str, Any]) -> dict[str, Any]:
    return {**item, 'dispensed': bool(item.get('dispensed', False))}


def create_prescription(store: RecordStore, caller, data: dict[str, Any]) -> dict[str, Any]:
    patient = require_patient(store, data['patientId'])
    prescription = {
        **data,
        'id': new_record_id(store, 'RX', prescription_key),
        'patientName': data.get('patientName') or full_name(patient),
        'medications': [_line_item(m) for m in data.get('medications', [])],
        'status': data.get('status') or 'Active',
        'prescribedAt': now_iso(),
        **actor_fields(caller, 'prescribed'),
    }
    store.set(prescription_key(prescription['id']), prescription)
    return prescription


def list_prescriptions(store: RecordStore) -> list[dict[str, Any]]:
    return store.get_by_prefix('prescription:')


def _derived_status(medications: list[dict[str, Any]], fallback: Optional[str]) -> Optional[str]:
    flags = [m.get('dispensed') for m in medications]
    if flags and all(flags):
        return 'Dispensed'
    if any(flags):
        return 'Partially Dispensed'
    return fallback


def _matches_items(status: str, medications: list[dict[str, Any]]) -> bool:
    """Whether ``status`` agrees with the line items' ``dispensed`` flags."""
    if status in ('Dispensed', 'Cancelled'):
        return True
    derived = _derived_status(medications, None)
    if status == 'Partially Dispensed':
        return derived == 'Partially Dispensed'
    return derived is None


def update_prescription(store: RecordStore, caller, prescription_id: str, changes: dict[str, Any]) -> dict[str, Any]:
    prescription = store.get(prescription_key(prescription_id))
    if prescription is None:
        raise RecordNotFound('Prescription not found')
    current = prescription.get('status')
    medications = [_line_item(m) for m in changes.get('medications', prescription.get('medications', []))]
    if 'status' in changes:
        new_status = changes['status']
    elif 'medications' in changes:
        new_status = _derived_status(medications, current)
    else:
        new_status = current
    check_transition(RANKS, TERMINAL, current, new_status)
    if ('status' in changes or 'medications' in changes) and not _matches_items(new_status, medications):
        raise ValidationError({'status': f'{new_status} does not match the dispensed medications'})
    if new_status == 'Dispensed':
        medications = [{**m, 'dispensed': True} for m in medications]

    updated = {**prescription, **changes, 'medications': medications, 'status': new_status, 'updatedAt': now_iso()}
    if new_status in ('Dispensed', 'Partially Dispensed') and new_status != current:
        updated.update(actor_fields(caller, 'dispensed'))
        updated['dispensedAt'] = updated['updatedAt']
    store.set(prescription_key(prescription_id), updated)
    return updated
