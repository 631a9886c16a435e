"""
Celery application for background work.

Only outbound notification email runs here.  When no broker is
configured (``CELERY_BROKER_URL`` unset) settings switch tasks to eager
mode so they execute in-process.
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "opalhms.settings")

app = Celery("opalhms")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
