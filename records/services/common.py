"""
Helpers shared by the domain services: ids, timestamps, key layout.

Key layout::

    <entity>:<id>                          primary copy
    <entity>:patient:<patientId>:<id>      patient-scoped copy (same content)

Records with a patient-scoped copy are always written through
:func:`save_indexed`, which stores every copy in one transaction.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from django.utils import timezone

from records.exceptions import InvalidTransition, RecordNotFound
from records.store import RecordStore


def now_iso() -> str:
    return timezone.now().isoformat()


def epoch_ms() -> int:
    return int(timezone.now().timestamp() * 1000)


def new_record_id(store: RecordStore, prefix: str, key_for: Callable[[str], str]) -> str:
    """``<prefix><epoch-ms>``, bumped past any id already taken."""
    ms = epoch_ms()
    while store.get(key_for(f'{prefix}{ms}')) is not None:
        ms += 1
    return f'{prefix}{ms}'


def patient_scope(entity: str, patient_id: str) -> str:
    return f'{entity}:patient:{patient_id}:'


def primary_records(store: RecordStore, entity: str) -> list[Any]:
    """All primary copies of ``entity``, skipping patient-scoped duplicates."""
    scoped = f'{entity}:patient:'
    return [v for k, v in store.items_by_prefix(f'{entity}:') if not k.startswith(scoped)]


def save_indexed(store: RecordStore, record: dict[str, Any], keys: Iterable[str]) -> dict[str, Any]:
    store.mset({key: record for key in keys})
    return record


def require_patient(store: RecordStore, patient_id: Optional[str]) -> dict[str, Any]:
    patient = store.get(f'patient:{patient_id}') if patient_id else None
    if not isinstance(patient, dict):
        raise RecordNotFound('Patient not found')
    return patient


def full_name(record: dict[str, Any]) -> str:
    return ' '.join(p for p in (record.get('firstName'), record.get('lastName')) if p)


def actor_fields(caller, prefix: str) -> dict[str, Any]:
    """``{<prefix>By: id, <prefix>ByName: name}`` for the caller."""
    return {f'{prefix}By': caller.id, f'{prefix}ByName': caller.name}


def check_transition(ranks: dict[str, int], terminal: frozenset, current: Optional[str], new: str) -> None:
    """Allow forward moves and cancellation; refuse leaving a terminal state or going back."""
    if new == current:
        return
    if current in terminal:
        raise InvalidTransition(f'Cannot change status from {current} to {new}')
    if new == 'Cancelled':
        return
    if ranks[new] < ranks.get(current or '', 0):
        raise InvalidTransition(f'Cannot change status from {current} back to {new}')
