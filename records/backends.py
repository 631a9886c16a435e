"""
Process-wide collaborators of the API.

The record store, identity provider, object store and mailer are built
once when Django finishes loading apps (see ``RecordsConfig.ready``) and
handed to the service functions explicitly by the views.  Tests swap
the container for one holding in-memory fakes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.apps import apps
from django.conf import settings

from .store import RecordStore
from .services.files import SupabaseStorage
from .services.identity import SupabaseIdentity
from .services.notifications import Notifier, ResendMailer


@dataclass
class Backends:
    store: RecordStore
    identity: Any
    files: Any
    mailer: Any
    notifier: Notifier


def build_backends() -> Backends:
    mailer = ResendMailer(
        settings.RESEND_API_KEY,
        settings.EMAIL_FROM,
        url=settings.RESEND_API_URL,
        timeout=settings.EMAIL_TIMEOUT,
    )
    return Backends(
        store=RecordStore(),
        identity=SupabaseIdentity(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            settings.SUPABASE_ANON_KEY,
            timeout=settings.SUPABASE_TIMEOUT,
        ),
        files=SupabaseStorage(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            settings.REPORTS_BUCKET,
            timeout=settings.SUPABASE_TIMEOUT,
        ),
        mailer=mailer,
        notifier=Notifier(mailer),
    )


def get_backends() -> Backends:
    return apps.get_app_config('records').backends
