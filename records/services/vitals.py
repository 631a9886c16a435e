"""
Vital sign records.

Readings (blood pressure, temperature, pulse, respiratory rate, oxygen
saturation) are kept as the display strings the nurse entered, e.g.
``"120/80"`` or ``"98.6°F"``.  Each record is stored twice: under
``vital:<id>`` and under ``vital:patient:<patientId>:<id>``.
"""
from __future__ import annotations

from typing import Any, Optional

from records.store import RecordStore
from .common import full_name, new_record_id, now_iso, patient_scope, primary_records, require_patient, save_indexed


def vital_key(vital_id: str) -> str:
    return f'vital:{vital_id}'


def derive_bmi(weight, height) -> Optional[str]:
    """BMI from weight in kg and height in cm, one decimal place."""
    try:
        w, h = float(weight), float(height)
    except (TypeError, ValueError):
        return None
    if w <= 0 or h <= 0:
        return None
    return f'{w / ((h / 100) ** 2):.1f}'


def record_vitals(store: RecordStore, caller, data: dict[str, Any]) -> dict[str, Any]:
    patient_id = data['patientId']
    patient = require_patient(store, patient_id)
    vital = {
        **data,
        'id': new_record_id(store, 'VIT', vital_key),
        'patientName': data.get('patientName') or full_name(patient),
        'bmi': derive_bmi(data.get('weight'), data.get('height')) or data.get('bmi'),
        'recordedAt': now_iso(),
        'recordedBy': caller.id,
        'recordedByName': caller.name,
    }
    return save_indexed(store, vital, [vital_key(vital['id']), patient_scope('vital', patient_id) + vital['id']])


def list_vitals(store: RecordStore) -> list[dict[str, Any]]:
    return primary_records(store, 'vital')


def patient_vitals(store: RecordStore, patient_id: str) -> list[dict[str, Any]]:
    return store.get_by_prefix(patient_scope('vital', patient_id))
