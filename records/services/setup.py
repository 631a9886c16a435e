"""
One-time bootstrap of the default administrator.

Guarded by the singleton marker ``setup:admin_created``: once present,
further calls report that the admin exists and change nothing.
"""
from __future__ import annotations

import logging
from typing import Any

from django.conf import settings

from records.store import RecordStore
from .accounts import provision_account
from .common import now_iso

logger = logging.getLogger(__name__)

SETUP_MARKER = 'setup:admin_created'


def create_default_admin(identity, store: RecordStore) -> dict[str, Any]:
    if store.get(SETUP_MARKER):
        logger.info('default admin account already exists')
        return {'success': True, 'message': 'Admin already exists'}

    email = settings.DEFAULT_ADMIN_EMAIL
    password = settings.DEFAULT_ADMIN_PASSWORD
    metadata = {
        'firstName': 'System',
        'lastName': 'Administrator',
        'role': 'admin',
        'department': 'Administration',
        'name': 'System Administrator',
    }

    def persist(user):
        created = now_iso()
        store.mset({
            f'staff:{user.id}': {
                'id': user.id,
                'email': email,
                'firstName': 'System',
                'lastName': 'Administrator',
                'role': 'admin',
                'department': 'Administration',
                'status': 'active',
                'createdAt': created,
                'isDefaultAdmin': True,
            },
            SETUP_MARKER: {'created': True, 'timestamp': created, 'adminId': user.id},
        })
        return user

    user = provision_account(identity, email=email, password=password, metadata=metadata, persist=persist)
    logger.warning('default admin %s created (%s); change its password after first login', email, user.id)
    return {'success': True, 'credentials': {'email': email, 'password': password}}
