"""
Role based authorization policy.

``is_allowed(role, operation)`` is the single place where the system
decides which role may do what.  It is evaluated on every request from
the role carried in the caller's identity-provider metadata; nothing is
cached between requests.

Rules:

* staff account creation and staff updates: admin only
* patient account creation: registrar or admin
* medical-report upload: doctor, nurse, lab_tech or admin
* medical-report deletion: doctor or admin
* medical-report read: every staff role, and patients for their own
  reports only (see :func:`can_read_reports`)
* dashboard statistics: admin only
* every other read/write (staff listing, patients, appointments, vitals,
  lab orders, prescriptions, consultations, reminders): any
  authenticated role
"""
from __future__ import annotations

import enum
from typing import Optional


class Role(str, enum.Enum):
    DOCTOR = 'doctor'
    NURSE = 'nurse'
    LAB_TECH = 'lab_tech'
    PHARMACIST = 'pharmacist'
    REGISTRAR = 'registrar'
    ADMIN = 'admin'
    PATIENT = 'patient'

    @classmethod
    def parse(cls, value) -> Optional['Role']:
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


STAFF_ROLES = frozenset(r for r in Role if r is not Role.PATIENT)
ALL_ROLES = frozenset(Role)


class Operation(str, enum.Enum):
    CREATE_STAFF = 'create_staff'
    UPDATE_STAFF = 'update_staff'
    LIST_STAFF = 'list_staff'
    CREATE_PATIENT = 'create_patient'
    READ_PATIENTS = 'read_patients'
    CREATE_APPOINTMENT = 'create_appointment'
    LIST_APPOINTMENTS = 'list_appointments'
    RECORD_VITALS = 'record_vitals'
    READ_VITALS = 'read_vitals'
    CREATE_LAB_ORDER = 'create_lab_order'
    LIST_LAB_ORDERS = 'list_lab_orders'
    UPDATE_LAB_ORDER = 'update_lab_order'
    CREATE_PRESCRIPTION = 'create_prescription'
    LIST_PRESCRIPTIONS = 'list_prescriptions'
    UPDATE_PRESCRIPTION = 'update_prescription'
    CREATE_CONSULTATION = 'create_consultation'
    LIST_CONSULTATIONS = 'list_consultations'
    UPDATE_CONSULTATION = 'update_consultation'
    UPLOAD_REPORT = 'upload_report'
    READ_REPORTS = 'read_reports'
    DELETE_REPORT = 'delete_report'
    SEND_NOTIFICATION = 'send_notification'
    VIEW_DASHBOARD = 'view_dashboard'


POLICY: dict[Operation, frozenset[Role]] = {
    Operation.CREATE_STAFF: frozenset({Role.ADMIN}),
    Operation.UPDATE_STAFF: frozenset({Role.ADMIN}),
    Operation.CREATE_PATIENT: frozenset({Role.REGISTRAR, Role.ADMIN}),
    Operation.UPLOAD_REPORT: frozenset({Role.DOCTOR, Role.NURSE, Role.LAB_TECH, Role.ADMIN}),
    Operation.DELETE_REPORT: frozenset({Role.DOCTOR, Role.ADMIN}),
    # patients pass here and are narrowed to their own id by can_read_reports
    Operation.READ_REPORTS: ALL_ROLES,
    Operation.VIEW_DASHBOARD: frozenset({Role.ADMIN}),
    Operation.LIST_STAFF: ALL_ROLES,
    Operation.READ_PATIENTS: ALL_ROLES,
    Operation.CREATE_APPOINTMENT: ALL_ROLES,
    Operation.LIST_APPOINTMENTS: ALL_ROLES,
    Operation.RECORD_VITALS: ALL_ROLES,
    Operation.READ_VITALS: ALL_ROLES,
    Operation.CREATE_LAB_ORDER: ALL_ROLES,
    Operation.LIST_LAB_ORDERS: ALL_ROLES,
    Operation.UPDATE_LAB_ORDER: ALL_ROLES,
    Operation.CREATE_PRESCRIPTION: ALL_ROLES,
    Operation.LIST_PRESCRIPTIONS: ALL_ROLES,
    Operation.UPDATE_PRESCRIPTION: ALL_ROLES,
    Operation.CREATE_CONSULTATION: ALL_ROLES,
    Operation.LIST_CONSULTATIONS: ALL_ROLES,
    Operation.UPDATE_CONSULTATION: ALL_ROLES,
    Operation.SEND_NOTIFICATION: ALL_ROLES,
}


def is_allowed(role: Optional[Role], operation: Operation) -> bool:
    if role is None:
        return False
    return role in POLICY.get(operation, frozenset())


def can_read_reports(role: Optional[Role], caller_id: str, patient_id: str) -> bool:
    if not is_allowed(role, Operation.READ_REPORTS):
        return False
    if role is Role.PATIENT:
        return caller_id == patient_id
    return True
