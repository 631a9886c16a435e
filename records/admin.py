"""
Django admin registration for the record store.

Lets a superuser inspect raw key/value entries via ``/admin/`` during
development, e.g. to verify that primary and patient-scoped copies of a
record agree.
"""

from django.contrib import admin

from .models import KVEntry


@admin.register(KVEntry)
class KVEntryAdmin(admin.ModelAdmin):
    list_display = ('key', 'updated_at')
    search_fields = ('key',)
    ordering = ('key',)
