"""
Account provisioning and sign-in.

Creating a staff member or a patient touches two systems: the identity
provider (login + role metadata) and the record store (domain record).
:func:`provision_account` creates the login first and, if the domain
record cannot be written, deletes the login again so the two do not
drift apart.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from records.policy import Role
from records.store import RecordStore
from .identity import CallerIdentity

logger = logging.getLogger(__name__)


def provision_account(identity, *, email: str, password: str, metadata: dict[str, Any],
                      persist: Callable[[CallerIdentity], Any]) -> Any:
    user = identity.create_user(email, password, metadata)
    try:
        return persist(user)
    except Exception:
        logger.error('persisting records for new account %s failed; removing the account', user.id)
        try:
            identity.delete_user(user.id)
        except Exception:
            logger.exception('could not remove orphaned account %s', user.id)
        raise


def sign_in(identity, store: RecordStore, email: str, password: str) -> Optional[dict[str, Any]]:
    result = identity.sign_in(email, password)
    if result is None:
        return None
    session, user = result
    if user.role is Role.PATIENT:
        additional = store.get(f'patient:{user.id}')
    else:
        additional = store.get(f'staff:{user.id}')
    return {
        'session': session.as_dict(),
        'user': {
            'id': user.id,
            'email': user.email,
            'role': user.role.value if user.role else None,
            'name': user.name,
            'department': user.department,
            'additionalData': additional,
        },
    }
