"""
Identity provider client.

Bearer tokens are verified by asking the provider (Supabase GoTrue)
who they belong to.  The caller's role, display name and department
come from the provider's stored ``user_metadata``; the local record
store is never consulted for them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from records.exceptions import ProviderRejected
from records.policy import Role
from .supabase import SupabaseClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerIdentity:
    """The verified caller of one request (``request.user``)."""
    id: str
    email: str = ''
    role: Optional[Role] = None
    name: str = ''
    department: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> str:
        # DRF's user-keyed throttles identify the caller by ``pk``
        return self.id

    @classmethod
    def from_provider_user(cls, user: dict[str, Any]) -> 'CallerIdentity':
        meta = user.get('user_metadata') or {}
        name = meta.get('name') or ' '.join(p for p in (meta.get('firstName'), meta.get('lastName')) if p)
        return cls(
            id=str(user['id']),
            email=user.get('email') or '',
            role=Role.parse(meta.get('role')),
            name=name,
            department=meta.get('department'),
            metadata=dict(meta),
        )


@dataclass
class Session:
    access_token: str
    refresh_token: str = ''
    expires_in: int = 0
    token_type: str = 'bearer'

    def as_dict(self) -> dict[str, Any]:
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_in': self.expires_in,
            'token_type': self.token_type,
        }


class SupabaseIdentity(SupabaseClient):
    service_name = 'identity provider'

    def __init__(self, url: str, service_key: str, anon_key: str = '', **kwargs):
        super().__init__(url, service_key, **kwargs)
        self.anon_key = anon_key or service_key

    def resolve(self, token: str) -> Optional[CallerIdentity]:
        """Return the identity for ``token`` or ``None`` if it is invalid/expired."""
        r = self._request('GET', '/auth/v1/user', headers=self._headers(bearer=token))
        if r.status_code != 200:
            return None
        data = r.json()
        if not isinstance(data, dict) or not data.get('id'):
            return None
        return CallerIdentity.from_provider_user(data)

    def create_user(self, email: str, password: str, metadata: dict[str, Any]) -> CallerIdentity:
        r = self._request('POST', '/auth/v1/admin/users', headers=self._headers(), json={
            'email': email,
            'password': password,
            'email_confirm': True,
            'user_metadata': metadata,
        })
        if r.status_code >= 400:
            raise ProviderRejected(self.error_message(r))
        data = r.json()
        # older GoTrue releases wrap the user object
        user = data.get('user', data) if isinstance(data, dict) else {}
        return CallerIdentity.from_provider_user(user)

    def delete_user(self, user_id: str) -> None:
        r = self._request('DELETE', f'/auth/v1/admin/users/{user_id}', headers=self._headers())
        if r.status_code >= 400 and r.status_code != 404:
            raise ProviderRejected(self.error_message(r))

    def sign_in(self, email: str, password: str) -> Optional[tuple[Session, CallerIdentity]]:
        r = self._request(
            'POST', '/auth/v1/token',
            params={'grant_type': 'password'},
            headers=self._headers(bearer=self.anon_key, apikey=self.anon_key),
            json={'email': email, 'password': password},
        )
        if r.status_code != 200:
            logger.info('sign-in rejected for %s: %s', email, self.error_message(r))
            return None
        data = r.json()
        session = Session(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token', ''),
            expires_in=int(data.get('expires_in') or 0),
            token_type=data.get('token_type', 'bearer'),
        )
        return session, CallerIdentity.from_provider_user(data['user'])
