"""
Database model backing the record store.

All domain entities (staff, patients, appointments, vitals, lab orders,
prescriptions, consultations, medical reports and the setup marker) are
stored as JSON documents in this single table, addressed by
colon-separated string keys such as ``patient:<id>`` or
``vital:patient:<patientId>:<id>``.
"""
from __future__ import annotations

from django.db import models


class KVEntry(models.Model):
    """One key/value pair.  ``value`` may be any JSON-serializable data."""
    key = models.CharField(max_length=255, primary_key=True)
    value = models.JSONField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "KV entry"
        verbose_name_plural = "KV entries"

    def __str__(self) -> str:
        return self.key
