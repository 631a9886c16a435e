"""Shared HTTP plumbing for the Supabase REST endpoints."""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from records.exceptions import DependencyError

logger = logging.getLogger(__name__)


class SupabaseClient:
    service_name = 'supabase'

    def __init__(self, url: str, service_key: str, *, timeout: int = 10, session: Optional[requests.Session] = None):
        self.url = url.rstrip('/')
        self.service_key = service_key
        self.timeout = timeout
        self.http = session or requests.Session()

    def _headers(self, bearer: Optional[str] = None, apikey: Optional[str] = None) -> dict[str, str]:
        return {
            'apikey': apikey or self.service_key,
            'Authorization': f'Bearer {bearer or self.service_key}',
        }

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        if not self.url:
            raise DependencyError(self.service_name, 'SUPABASE_URL is not configured')
        kwargs.setdefault('timeout', self.timeout)
        try:
            r = self.http.request(method, f'{self.url}{path}', **kwargs)
        except requests.RequestException as e:
            raise DependencyError(self.service_name, str(e)) from e
        if r.status_code >= 500:
            raise DependencyError(self.service_name, f'{r.status_code} {r.text[:200]}')
        return r

    @staticmethod
    def error_message(r: requests.Response) -> str:
        try:
            data = r.json()
        except ValueError:
            return r.text or f'HTTP {r.status_code}'
        if isinstance(data, dict):
            return str(data.get('msg') or data.get('message') or data.get('error_description')
                       or data.get('error') or f'HTTP {r.status_code}')
        return f'HTTP {r.status_code}'
