"""
Appointment booking (patients) and appointment handling (center admins).
"""
import logging
import math

from django.db.models import QuerySet
from django.utils import timezone

from centers.exceptions import NotFoundOrForbidden, ValidationFailed
from centers.models import Appointment, DiagnosticCenter, DiagnosticTest, User
from centers.services.scoping import resolve_child_scoped, scoped
from centers.services.storage import ResultStorage

logger = logging.getLogger(__name__)


def _hydrated() -> QuerySet:
    return Appointment.objects.select_related('patient', 'test', 'diagnostic_center')


def format_appointment(appt: Appointment) -> dict:
    patient = appt.patient
    return {
        'id': appt.id,
        'status': appt.status,
        'appointmentDate': appt.appointment_date.isoformat(),
        'appointmentTime': appt.appointment_time,
        'notes': appt.notes,
        'patient': {
            'id': patient.id,
            'name': patient.name,
            'email': patient.email,
            'phone': patient.phone,
        },
        'test': {
            'id': appt.test.id,
            'name': appt.test.name,
            'category': appt.test.category,
            'price': str(appt.test.price),
        },
        'center': {
            'id': appt.diagnostic_center.id,
            'name': appt.diagnostic_center.name,
        },
        'results': {
            'reportUrl': appt.report_url,
            'summary': appt.result_summary,
            'uploadedAt': appt.results_uploaded_at.isoformat() if appt.results_uploaded_at else None,
        } if appt.has_results else None,
        'createdAt': appt.created_at.isoformat() if appt.created_at else None,
    }


def book_appointment(patient: User, data: dict) -> Appointment:
    """Book ``data['test']`` at ``data['center']`` for ``patient``.

    A test that is inactive or offered by another center is reported the
    same way as a missing one.
    """
    test = (
        DiagnosticTest.objects.select_related('diagnostic_center')
        .filter(pk=data['test'], diagnostic_center_id=data['center'],
                is_active=True, diagnostic_center__is_active=True)
        .first()
    )
    if test is None:
        raise NotFoundOrForbidden()
    if data['appointmentDate'] < timezone.localdate():
        raise ValidationFailed('Appointment date cannot be in the past')
    if test.scheduled_times and data['appointmentTime'] not in test.scheduled_times:
        raise ValidationFailed('Selected time is not available for this test')

    appt = Appointment.objects.create(
        patient=patient,
        test=test,
        diagnostic_center=test.diagnostic_center,
        appointment_date=data['appointmentDate'],
        appointment_time=data['appointmentTime'],
        notes=data.get('notes', ''),
    )
    logger.info('Patient %s booked appointment %s (test %s)', patient.pk, appt.pk, test.pk)
    return _hydrated().get(pk=appt.pk)


def patient_appointments(patient: User, *, with_results_only: bool = False) -> QuerySet:
    qs = _hydrated().filter(patient=patient, is_active=True)
    if with_results_only:
        qs = qs.exclude(report_url='')
    return qs.order_by('-created_at')


def list_center_appointments(center: DiagnosticCenter, *, page: int = 1, limit: int = 10,
                             status: str | None = None) -> dict:
    qs = scoped(_hydrated().filter(is_active=True), center)
    if status:
        qs = qs.filter(status=status)
    total = qs.count()
    start = (page - 1) * limit
    rows = qs.order_by('-appointment_date', '-appointment_time', '-id')[start:start + limit]
    return {
        'appointments': [format_appointment(a) for a in rows],
        'totalPages': math.ceil(total / limit) if total else 0,
        'currentPage': page,
        'total': total,
    }


def get_appointment(center: DiagnosticCenter, appointment_id) -> Appointment:
    return resolve_child_scoped(_hydrated(), center.pk, appointment_id)


def update_status(appt: Appointment, status: str) -> Appointment:
    if appt.status != status:
        appt.status = status
        appt.save(update_fields=['status', 'updated_at'])
    return appt


def attach_results(appt: Appointment, upload, summary: str = '',
                   storage: ResultStorage | None = None) -> Appointment:
    """Store ``upload`` and record it on an appointment resolved through :func:`get_appointment`."""
    storage = storage or ResultStorage()
    appt.report_url = storage.store(upload.read(), upload.name)
    appt.result_summary = summary or ''
    appt.results_uploaded_at = timezone.now()
    appt.save(update_fields=['report_url', 'result_summary', 'results_uploaded_at', 'updated_at'])
    logger.info('Center %s uploaded results for appointment %s', appt.diagnostic_center_id, appt.pk)
    return appt
