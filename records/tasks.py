"""
Celery tasks.
"""
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def send_email(to, subject, html):
    """Deliver one notification email; failures are logged, never retried."""
    from records.backends import get_backends

    result = get_backends().mailer.send(to, subject, html)
    if not result.success:
        logger.warning('notification "%s" to %s not delivered: %s', subject, to, result.error)
    return result.success
