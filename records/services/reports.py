"""
Medical reports.

The file itself goes to the object store at ``<patientId>/<reportId>_<fileName>``;
its metadata, including a long-lived signed download URL, is kept in
the record store under ``medical-report:<id>`` and
``medical-report:patient:<patientId>:<id>``.

Signed URLs expire, so when reports are listed any URL issued more than
``REPORT_URL_REFRESH_DAYS`` ago is re-signed and both metadata copies
are rewritten together.
"""
from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Optional

from django.conf import settings
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from records.exceptions import RecordNotFound
from records.store import RecordStore
from .common import actor_fields, new_record_id, now_iso, patient_scope, save_indexed

logger = logging.getLogger(__name__)

DEFAULT_FILE_TYPE = 'application/pdf'


def report_key(report_id: str) -> str:
    return f'medical-report:{report_id}'


def _keys(report: dict[str, Any]) -> list[str]:
    return [report_key(report['id']), patient_scope('medical-report', report['patientId']) + report['id']]


def decode_payload(file_data: str) -> bytes:
    """Decode base64 content, accepting a ``data:<type>;base64,`` prefix."""
    payload = file_data.split(',', 1)[1] if ',' in file_data else file_data
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError({'fileData': 'File data is not valid base64'})


def _check_upload(data: bytes, file_type: str) -> None:
    if not data:
        raise ValidationError({'fileData': 'File is empty'})
    if len(data) > settings.UPLOAD_MAX_MB * 1024 * 1024:
        raise ValidationError({'fileData': f'File exceeds {settings.UPLOAD_MAX_MB} MB'})
    if not any(file_type.startswith(prefix) for prefix in settings.ALLOWED_UPLOAD_TYPES):
        raise ValidationError({'fileType': 'Unsupported file type'})


def upload_report(store: RecordStore, files, caller, *, patientId: str, fileName: str, fileData: str,
                  fileType: Optional[str] = None, reportType: Optional[str] = None,
                  description: Optional[str] = None) -> dict[str, Any]:
    file_type = fileType or DEFAULT_FILE_TYPE
    content = decode_payload(fileData)
    _check_upload(content, file_type)

    report_id = new_record_id(store, 'RPT', report_key)
    file_path = f'{patientId}/{report_id}_{fileName}'
    files.upload(file_path, content, file_type)
    try:
        report = {
            'id': report_id,
            'patientId': patientId,
            'fileName': fileName,
            'filePath': file_path,
            'fileType': file_type,
            'reportType': reportType or 'General',
            'description': description,
            'uploadedAt': now_iso(),
            **actor_fields(caller, 'uploaded'),
            'signedUrl': files.signed_url(file_path, settings.REPORT_URL_TTL_SECONDS),
        }
        return save_indexed(store, report, _keys(report))
    except Exception:
        logger.error('recording report %s failed; removing uploaded file %s', report_id, file_path)
        try:
            files.remove([file_path])
        except Exception:
            logger.exception('could not remove orphaned file %s', file_path)
        raise


def _issued_at(report: dict[str, Any]) -> Optional[datetime]:
    raw = report.get('signedUrlRefreshedAt') or report.get('uploadedAt')
    if not raw:
        return None
    try:
        issued = datetime.fromisoformat(str(raw).replace('Z', '+00:00'))
    except ValueError:
        return None
    if timezone.is_naive(issued):
        issued = timezone.make_aware(issued, dt_timezone.utc)
    return issued


def is_stale(report: dict[str, Any], now: Optional[datetime] = None) -> bool:
    issued = _issued_at(report)
    if issued is None:
        return True
    now = now or timezone.now()
    return now - issued > timedelta(days=settings.REPORT_URL_REFRESH_DAYS)


def refresh_signed_url(store: RecordStore, files, report: dict[str, Any]) -> dict[str, Any]:
    url = files.signed_url(report['filePath'], settings.REPORT_URL_TTL_SECONDS)
    refreshed = {**report, 'signedUrl': url, 'signedUrlRefreshedAt': now_iso()}
    logger.info('re-signed URL for report %s', report['id'])
    return save_indexed(store, refreshed, _keys(refreshed))


def patient_reports(store: RecordStore, files, patient_id: str) -> list[dict[str, Any]]:
    reports = store.get_by_prefix(patient_scope('medical-report', patient_id))
    return [refresh_signed_url(store, files, r) if is_stale(r) else r for r in reports]


def delete_report(store: RecordStore, files, report_id: str) -> None:
    report = store.get(report_key(report_id))
    if report is None:
        raise RecordNotFound('Medical report not found')
    files.remove([report['filePath']])
    store.mdelete(_keys(report))
