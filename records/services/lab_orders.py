"""
Lab orders.

Status moves ``Pending -> Processing -> Completed``; ``Cancelled`` is
reachable from any state that is not yet terminal.  Skipping ahead
(``Pending -> Completed``) is accepted, going back is not.
"""
from __future__ import annotations

from typing import Any

from records.exceptions import RecordNotFound
from records.store import RecordStore
from .common import actor_fields, check_transition, full_name, new_record_id, now_iso, require_patient

STATUSES = ('Pending', 'Processing', 'Completed', 'Cancelled')
PRIORITIES = ('Routine', 'Urgent', 'STAT')
RANKS = {'Pending': 0, 'Processing': 1, 'Completed': 2, 'Cancelled': 2}
TERMINAL = frozenset({'Completed', 'Cancelled'})


def lab_key(order_id: str) -> str:
    return f'lab:{order_id}'


def create_lab_order(store: RecordStore, caller, data: dict[str, Any]) -> dict[str, Any]:
    patient = require_patient(store, data['patientId'])
    order = {
        **data,
        'id': new_record_id(store, 'LAB', lab_key),
        'patientName': data.get('patientName') or full_name(patient),
        'priority': data.get('priority') or 'Routine',
        'status': data.get('status') or 'Pending',
        'result': data.get('result'),
        'orderedAt': now_iso(),
        **actor_fields(caller, 'ordered'),
    }
    store.set(lab_key(order['id']), order)
    return order


def list_lab_orders(store: RecordStore) -> list[dict[str, Any]]:
    return store.get_by_prefix('lab:')


def update_lab_order(store: RecordStore, caller, order_id: str, changes: dict[str, Any]) -> dict[str, Any]:
    order = store.get(lab_key(order_id))
    if order is None:
        raise RecordNotFound('Lab order not found')
    new_status = changes.get('status', order.get('status'))
    check_transition(RANKS, TERMINAL, order.get('status'), new_status)
    updated = {**order, **changes, 'updatedAt': now_iso(), 'updatedBy': caller.id}
    if new_status == 'Completed' and not updated.get('completedAt'):
        updated['completedAt'] = updated['updatedAt']
    store.set(lab_key(order_id), updated)
    return updated
