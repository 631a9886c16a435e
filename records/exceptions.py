"""
Error types and the unified API exception handler.

Every error leaving the API has the body ``{"error": "<message>"}``.
Failures of external dependencies (identity provider, object store,
email provider, database) are logged with their detail and reported to
the client with a generic message only.
"""
from __future__ import annotations

import logging

from django.core.exceptions import RequestDataTooBig
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class DependencyError(exceptions.APIException):
    """An external service was unreachable or answered with a server error."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error'
    default_code = 'dependency_error'

    def __init__(self, service: str, reason: str = ''):
        super().__init__()
        self.service = service
        self.reason = reason

    def __str__(self) -> str:
        return f'{self.service} failure: {self.reason}' if self.reason else f'{self.service} failure'


class StorageError(DependencyError):
    """The record store backend failed."""

    def __init__(self, reason: str = ''):
        super().__init__('record store', reason)


class ProviderRejected(exceptions.APIException):
    """The identity provider refused a request (e.g. email already registered)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'provider_rejected'


class RecordNotFound(exceptions.NotFound):
    default_detail = 'Record not found'


class InvalidTransition(exceptions.ValidationError):
    """A status change that the entity's state machine does not allow."""


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for field, value in detail.items():
            msg = _first_message(value)
            if field in ('non_field_errors', 'detail'):
                return msg
            return f'{field}: {msg}'
        return 'Invalid request'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid request'
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, DependencyError):
        logger.error('%s during %s', exc, context.get('view').__class__.__name__ if context.get('view') else 'request')
        return Response({'error': DependencyError.default_detail}, status=exc.status_code)
    if isinstance(exc, RequestDataTooBig):
        return Response({'error': 'Request body too large'}, status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled error', exc_info=exc)
        return Response({'error': 'Internal server error'}, status=500)
    resp.data = {'error': _first_message(resp.data)}
    return resp
