"""
Patient appointment endpoints.

Patients may only book for themselves and only ever see their own
appointments; the patient is always taken from the authenticated
request, never from the payload.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from centers.models import Permission
from centers.permissions import IsActivePrincipal, IsPatient, permission_required
from centers.serializers.appointments import AppointmentCreateSerializer
from centers.services.appointments import book_appointment, format_appointment, patient_appointments


@api_view(['POST'])
@permission_classes([IsActivePrincipal, IsPatient, permission_required(Permission.BOOK_APPOINTMENTS)])
def book(request):
    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = book_appointment(request.user, s.validated_data)
    return Response(
        {'success': True, 'message': 'Appointment booked successfully', 'data': {'appointment': format_appointment(appt)}},
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsActivePrincipal, IsPatient])
def my_appointments(request):
    rows = patient_appointments(request.user)
    return Response({'success': True, 'data': {'appointments': [format_appointment(a) for a in rows]}})


@api_view(['GET'])
@permission_classes([IsActivePrincipal, IsPatient, permission_required(Permission.VIEW_RESULTS)])
def my_results(request):
    rows = patient_appointments(request.user, with_results_only=True)
    return Response({'success': True, 'data': {'results': [format_appointment(a) for a in rows]}})
