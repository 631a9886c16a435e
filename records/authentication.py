"""
Bearer token authentication against the identity provider.

A missing ``Authorization`` header leaves the request anonymous, which
the permission layer turns into a 401.  A header whose token the
provider does not recognise is rejected outright with a 401 as well.
An unreachable provider is not an authentication failure: it surfaces
as a :class:`records.exceptions.DependencyError` (500).
"""
from __future__ import annotations

from rest_framework import authentication, exceptions


class BearerAuthentication(authentication.BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if not auth:
            return None
        if auth[0].lower() != self.keyword.lower().encode():
            raise exceptions.AuthenticationFailed('Invalid authorization header format')
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid authorization header format')
        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid authorization header format')

        from .backends import get_backends

        identity = get_backends().identity.resolve(token)
        if identity is None:
            raise exceptions.AuthenticationFailed('Invalid or expired token')
        return identity, token

    def authenticate_header(self, request):
        return self.keyword
