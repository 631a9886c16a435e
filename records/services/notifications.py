"""
Outbound notification email.

Email is best effort: nothing in the system depends on delivery.  The
explicit reminder endpoints call :meth:`Notifier.send` and report the
outcome; domain writes that trigger mail (a scheduled consultation) use
:meth:`Notifier.dispatch`, which hands the message to a Celery task and
returns immediately.  Neither path raises.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

import requests
from django.utils.html import escape

logger = logging.getLogger(__name__)


@dataclass
class Delivery:
    success: bool
    error: Optional[str] = None
    data: Optional[dict] = None


class ResendMailer:
    """Sends mail through the Resend HTTP API."""

    def __init__(self, api_key: str, sender: str, *, url: str = 'https://api.resend.com/emails', timeout: int = 10):
        self.api_key = api_key
        self.sender = sender
        self.url = url
        self.timeout = timeout

    def send(self, to: str, subject: str, html: str) -> Delivery:
        if not self.api_key:
            logger.error('RESEND_API_KEY not configured')
            return Delivery(False, 'Email service not configured')
        try:
            r = requests.post(
                self.url,
                headers={'Authorization': f'Bearer {self.api_key}'},
                json={'from': self.sender, 'to': to, 'subject': subject, 'html': html},
                timeout=self.timeout,
            )
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning('email to %s failed: %s', to, e)
            return Delivery(False, 'Failed to send email')
        if not r.ok:
            logger.warning('email provider rejected message to %s: %s', to, data)
            return Delivery(False, (data or {}).get('message') or 'Failed to send email')
        return Delivery(True, data=data)


class Notifier:
    def __init__(self, mailer):
        self.mailer = mailer

    def send(self, to: str, subject: str, html: str) -> Delivery:
        try:
            return self.mailer.send(to, subject, html)
        except Exception as e:  # mail must never break the caller
            logger.warning('email to %s failed: %s', to, e)
            return Delivery(False, 'Failed to send email')

    def dispatch(self, to: str, subject: str, html: str) -> bool:
        """Queue a message for background delivery; ``False`` if it could not be queued."""
        from records.tasks import send_email

        try:
            send_email.delay(to, subject, html)
        except Exception as e:
            logger.warning('could not queue email to %s: %s', to, e)
            return False
        return True


# ---------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------
SIGNATURE = '<br><p>Best regards,<br>OPAL Hospital Management System</p>'


def _date(value: Any) -> str:
    if not value:
        return ''
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00')).strftime('%d %b %Y')
    except ValueError:
        return str(value)


def consultation_scheduled(consultation: dict[str, Any]) -> tuple[str, str]:
    html = (
        '<h2>Consultation Scheduled - OPAL HMS</h2>'
        f'<p>Dear {escape(consultation.get("patientName") or "patient")},</p>'
        '<p>Your consultation has been scheduled:</p><ul>'
        f'<li><strong>Doctor:</strong> {escape(consultation.get("doctorName") or "")}</li>'
        f'<li><strong>Date:</strong> {escape(_date(consultation.get("appointmentDate")))}</li>'
        f'<li><strong>Time:</strong> {escape(consultation.get("appointmentTime") or "")}</li>'
        f'<li><strong>Department:</strong> {escape(consultation.get("department") or "General")}</li>'
        '</ul>'
        '<p>Please arrive 15 minutes before your scheduled time.</p>'
        '<p>If you need to reschedule, please contact us at least 24 hours in advance.</p>'
        + SIGNATURE
    )
    return 'Consultation Scheduled', html


def appointment_reminder(*, patient_name: str, doctor_name: str, appointment_date: Any, appointment_time: str) -> tuple[str, str]:
    html = (
        '<h2>Appointment Reminder - OPAL HMS</h2>'
        f'<p>Dear {escape(patient_name)},</p>'
        '<p>This is a reminder about your upcoming appointment:</p><ul>'
        f'<li><strong>Doctor:</strong> {escape(doctor_name)}</li>'
        f'<li><strong>Date:</strong> {escape(_date(appointment_date))}</li>'
        f'<li><strong>Time:</strong> {escape(appointment_time)}</li>'
        '</ul>'
        '<p>Please arrive 15 minutes before your scheduled time.</p>'
        '<p>If you need to reschedule, please contact us as soon as possible.</p>'
        + SIGNATURE
    )
    return 'Appointment Reminder', html


def prescription_ready(*, patient_name: str, medications: Iterable[dict[str, Any]]) -> tuple[str, str]:
    items = ''.join(
        f'<li><strong>{escape(m.get("name") or m.get("drugName") or "")}</strong>'
        f' - {escape(m.get("dosage") or "")} ({escape(m.get("frequency") or "")})</li>'
        for m in medications
    )
    html = (
        '<h2>New Prescription - OPAL HMS</h2>'
        f'<p>Dear {escape(patient_name)},</p>'
        '<p>A new prescription has been issued for you:</p>'
        f'<ul>{items}</ul>'
        '<p>Please visit the pharmacy to collect your medications.</p>'
        '<p>Remember to follow the dosage instructions carefully.</p>'
        + SIGNATURE
    )
    return 'New Prescription Available', html
