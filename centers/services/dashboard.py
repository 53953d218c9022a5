from django.db.models import Count
from django.utils import timezone

from centers.models import Appointment, DiagnosticCenter, DiagnosticTest
from centers.services.appointments import format_appointment
from centers.services.catalogue import format_center
from centers.services.scoping import scoped


def center_dashboard(center: DiagnosticCenter) -> dict:
    appointments = scoped(Appointment.objects.filter(is_active=True), center)
    recent = (
        appointments.select_related('patient', 'test', 'diagnostic_center')
        .order_by('-created_at', '-id')[:5]
    )
    by_status = {
        row['status']: row['count']
        for row in appointments.values('status').annotate(count=Count('id')).order_by('status')
    }
    return {
        'diagnosticCenter': format_center(center),
        'stats': {
            'totalAppointments': appointments.count(),
            'totalTests': scoped(DiagnosticTest.objects.filter(is_active=True), center).count(),
            'todaysAppointments': appointments.filter(appointment_date=timezone.localdate()).count(),
            'recentAppointments': [format_appointment(a) for a in recent],
            'appointmentStats': [
                {'status': s, 'count': by_status.get(s, 0)} for s, _ in Appointment.STATUS_CHOICES
            ],
        },
    }
