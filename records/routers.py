"""
URL mappings for the OPAL HMS API.

Trailing slashes are deliberately omitted; the paths are the ones the
dashboard front end calls.  Literal segments (``mrn``, ``patient``,
``upload``) are listed before the ``<id>`` catch-alls they would
otherwise collide with.
"""
from django.urls import path

from .views import (
    appointments,
    auth,
    consultations,
    dashboard,
    health,
    lab_orders,
    notifications,
    patients,
    prescriptions,
    reports,
    setup,
    staff,
    vitals,
)

urlpatterns = [
    path('health', health.health),
    path('setup/init', setup.setup_init),
    # Accounts
    path('auth/create-staff', auth.create_staff),
    path('auth/create-patient', auth.create_patient),
    path('auth/signin', auth.signin),
    # Staff
    path('staff', staff.staff_list),
    path('staff/<str:staff_id>', staff.staff_detail),
    # Patients
    path('patients', patients.patients_list),
    path('patients/mrn/<str:mrn>', patients.patient_by_mrn),
    path('patients/<str:patient_id>', patients.patient_detail),
    # Clinical records
    path('appointments', appointments.appointments),
    path('vitals', vitals.vitals),
    path('vitals/patient/<str:patient_id>', vitals.patient_vitals),
    path('lab-orders', lab_orders.lab_orders),
    path('lab-orders/<str:order_id>', lab_orders.lab_order_detail),
    path('prescriptions', prescriptions.prescriptions),
    path('prescriptions/<str:prescription_id>', prescriptions.prescription_detail),
    path('consultations', consultations.consultations),
    path('consultations/patient/<str:patient_id>', consultations.patient_consultations),
    path('consultations/<str:consultation_id>', consultations.consultation_detail),
    # Medical reports
    path('medical-reports/upload', reports.upload_report),
    path('medical-reports/patient/<str:patient_id>', reports.patient_reports),
    path('medical-reports/<str:report_id>', reports.report_detail),
    # Notifications
    path('reminders/appointment', notifications.appointment_reminder),
    path('notifications/prescription', notifications.prescription_notification),
    # Admin
    path('dashboard/stats', dashboard.dashboard_stats),
]
