"""Headline numbers for the admin dashboard, computed on every request."""
from __future__ import annotations

from django.utils import timezone

from records.store import RecordStore
from .appointments import list_appointments
from .common import primary_records
from .lab_orders import list_lab_orders
from .patients import list_patients
from .prescriptions import list_prescriptions
from .staff import list_staff


def summary(store: RecordStore) -> dict[str, int]:
    today = timezone.localdate().isoformat()
    appointments = list_appointments(store)
    return {
        'patients': len(list_patients(store)),
        'activeStaff': sum(1 for s in list_staff(store) if s.get('status') == 'active'),
        'appointmentsToday': sum(1 for a in appointments if str(a.get('date', ''))[:10] == today),
        'appointments': len(appointments),
        'pendingLabOrders': sum(1 for o in list_lab_orders(store) if o.get('status') in ('Pending', 'Processing')),
        'openPrescriptions': sum(
            1 for p in list_prescriptions(store) if p.get('status') in ('Pending', 'Active', 'Partially Dispensed')
        ),
        'consultations': len(primary_records(store, 'consultation')),
    }
