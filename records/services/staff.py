from __future__ import annotations

from typing import Any

from records.exceptions import RecordNotFound
from records.store import RecordStore
from .accounts import provision_account
from .common import now_iso

UPDATABLE_FIELDS = ('firstName', 'lastName', 'department', 'phone', 'status')


def staff_key(staff_id: str) -> str:
    return f'staff:{staff_id}'


def create_staff(identity, store: RecordStore, caller, *, email: str, password: str, firstName: str,
                 lastName: str, role: str, department: str = '', phone: str = '') -> dict[str, Any]:
    name = f'{firstName} {lastName}'
    metadata = {
        'firstName': firstName,
        'lastName': lastName,
        'role': role,
        'department': department,
        'phone': phone,
        'name': name,
    }

    def persist(user):
        store.set(staff_key(user.id), {
            'id': user.id,
            'email': email,
            'firstName': firstName,
            'lastName': lastName,
            'role': role,
            'department': department,
            'phone': phone,
            'status': 'active',
            'createdAt': now_iso(),
            'createdBy': caller.id,
        })
        return {'id': user.id, 'email': user.email or email, 'role': role, 'name': name}

    return provision_account(identity, email=email, password=password, metadata=metadata, persist=persist)


def list_staff(store: RecordStore) -> list[dict[str, Any]]:
    return store.get_by_prefix('staff:')


def update_staff(store: RecordStore, staff_id: str, changes: dict[str, Any]) -> dict[str, Any]:
    current = store.get(staff_key(staff_id))
    if current is None:
        raise RecordNotFound('Staff member not found')
    updated = {**current, **{k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}, 'updatedAt': now_iso()}
    store.set(staff_key(staff_id), updated)
    return updated
