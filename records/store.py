"""
Key-value record store.

A thin persistence layer over :class:`records.models.KVEntry`.  Keys are
plain strings; values are anything JSON-serializable.  Writes are
unconditional upserts (last writer wins).  Missing keys are reported as
``None`` rather than raised.  Backend failures surface as
:class:`records.exceptions.StorageError` and are never retried here.

Results of prefix scans come back in no particular order.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

from django.db import DatabaseError, transaction

from .exceptions import StorageError
from .models import KVEntry


class RecordStore:
    def __init__(self, using: str = 'default'):
        self.using = using

    def _qs(self):
        return KVEntry.objects.using(self.using)

    def set(self, key: str, value: Any) -> None:
        try:
            self._qs().update_or_create(key=key, defaults={'value': value})
        except DatabaseError as e:
            raise StorageError(str(e)) from e

    def get(self, key: str) -> Optional[Any]:
        try:
            entry = self._qs().filter(key=key).only('value').first()
        except DatabaseError as e:
            raise StorageError(str(e)) from e
        return entry.value if entry is not None else None

    def delete(self, key: str) -> None:
        try:
            self._qs().filter(key=key).delete()
        except DatabaseError as e:
            raise StorageError(str(e)) from e

    def items_by_prefix(self, prefix: str) -> list[tuple[str, Any]]:
        try:
            rows = self._qs().filter(key__startswith=prefix).values_list('key', 'value')
            return [(k, v) for k, v in rows]
        except DatabaseError as e:
            raise StorageError(str(e)) from e

    def get_by_prefix(self, prefix: str) -> list[Any]:
        return [v for _, v in self.items_by_prefix(prefix)]

    def mset(self, mapping: dict[str, Any]) -> None:
        """Write several keys in one transaction: either all land or none."""
        try:
            with transaction.atomic(using=self.using):
                for key, value in mapping.items():
                    self._qs().update_or_create(key=key, defaults={'value': value})
        except DatabaseError as e:
            raise StorageError(str(e)) from e

    def mget(self, keys: Iterable[str]) -> list[Optional[Any]]:
        keys = list(keys)
        try:
            found = dict(self._qs().filter(key__in=keys).values_list('key', 'value'))
        except DatabaseError as e:
            raise StorageError(str(e)) from e
        return [found.get(k) for k in keys]

    def mdelete(self, keys: Iterable[str]) -> None:
        try:
            with transaction.atomic(using=self.using):
                self._qs().filter(key__in=list(keys)).delete()
        except DatabaseError as e:
            raise StorageError(str(e)) from e

    def ping(self) -> bool:
        try:
            self._qs().exists()
        except DatabaseError:
            return False
        return True
