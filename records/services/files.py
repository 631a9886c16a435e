"""Object store client for medical report files (Supabase Storage)."""
from __future__ import annotations

from urllib.parse import quote

from records.exceptions import DependencyError, ProviderRejected
from .supabase import SupabaseClient


class SupabaseStorage(SupabaseClient):
    service_name = 'object store'

    def __init__(self, url: str, service_key: str, bucket: str, **kwargs):
        super().__init__(url, service_key, **kwargs)
        self.bucket = bucket

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        headers = self._headers()
        headers.update({'Content-Type': content_type, 'x-upsert': 'false'})
        r = self._request('POST', f'/storage/v1/object/{self.bucket}/{quote(path)}', headers=headers, data=data)
        if r.status_code >= 400:
            raise ProviderRejected(f'Failed to upload file: {self.error_message(r)}')

    def signed_url(self, path: str, expires_in: int) -> str:
        r = self._request(
            'POST', f'/storage/v1/object/sign/{self.bucket}/{quote(path)}',
            headers=self._headers(), json={'expiresIn': expires_in},
        )
        if r.status_code >= 400:
            raise DependencyError(self.service_name, self.error_message(r))
        signed = r.json().get('signedURL') or r.json().get('signedUrl')
        if not signed:
            raise DependencyError(self.service_name, 'no signed URL in response')
        if signed.startswith('http'):
            return signed
        return f'{self.url}/storage/v1{signed}'

    def remove(self, paths: list[str]) -> None:
        r = self._request('DELETE', f'/storage/v1/object/{self.bucket}', headers=self._headers(), json={'prefixes': paths})
        if r.status_code >= 400:
            raise DependencyError(self.service_name, self.error_message(r))
