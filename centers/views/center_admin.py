"""
Center administrator endpoints.

Every handler first resolves the center owned by the requesting admin
and hands it to the service layer, which scopes all queries to it.
Ids taken from the URL or the payload are treated as untrusted: a test,
appointment or staff member of another center is reported exactly like
a missing one.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from centers.models import Permission
from centers.permissions import IsActivePrincipal, IsCenterAdmin, permission_required
from centers.serializers.appointments import (
    AppointmentListQuerySerializer,
    AppointmentStatusSerializer,
    ResultUploadSerializer,
)
from centers.serializers.diagnostic_tests import DiagnosticTestSerializer
from centers.serializers.staff import StaffCreateSerializer
from centers.services import appointments as appointment_svc
from centers.services import diagnostic_tests as test_svc
from centers.services import staff as staff_svc
from centers.services.catalogue import format_test
from centers.services.dashboard import center_dashboard
from centers.services.scoping import resolve_owned_center


def _gate(permission):
    return [IsActivePrincipal, IsCenterAdmin, permission_required(permission)]


@api_view(['GET'])
@permission_classes(_gate(Permission.VIEW_DASHBOARD))
def dashboard(request):
    center = resolve_owned_center(request.user)
    return Response({'success': True, 'data': center_dashboard(center)})


# ---------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes(_gate(Permission.MANAGE_STAFF))
def staff(request):
    center = resolve_owned_center(request.user)
    if request.method == 'GET':
        members = staff_svc.list_staff(center)
        return Response({'success': True, 'data': {
            'staff': [staff_svc.format_user(u) for u in members],
            'centerName': center.name,
        }})

    s = StaffCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user, initial_password = staff_svc.add_staff(
        center,
        name=vd['name'],
        email=vd['email'],
        phone=vd.get('phone', ''),
        role=vd['role'],
        password=vd.get('password') or None,
    )
    data = {'staff': staff_svc.format_user(user)}
    if not vd.get('password'):
        data['initialPassword'] = initial_password
    return Response(
        {'success': True, 'message': 'Staff member added successfully', 'data': data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['DELETE'])
@permission_classes(_gate(Permission.MANAGE_STAFF))
def staff_detail(request, staff_id):
    center = resolve_owned_center(request.user)
    staff_svc.deactivate_staff(center, staff_id, actor=request.user)
    return Response({'success': True, 'message': 'Staff member deactivated successfully'})


# ---------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes(_gate(Permission.MANAGE_APPOINTMENTS))
def appointments(request):
    center = resolve_owned_center(request.user)
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    data = appointment_svc.list_center_appointments(
        center, page=vd['page'], limit=vd['limit'], status=vd.get('status')
    )
    return Response({'success': True, 'data': data})


@api_view(['PATCH'])
@permission_classes(_gate(Permission.MANAGE_APPOINTMENTS))
def appointment_status(request, appointment_id):
    center = resolve_owned_center(request.user)
    appt = appointment_svc.get_appointment(center, appointment_id)
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = appointment_svc.update_status(appt, s.validated_data['status'])
    return Response({
        'success': True,
        'message': 'Appointment status updated',
        'data': {'appointment': appointment_svc.format_appointment(appt)},
    })


# ---------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes(_gate(Permission.MANAGE_TESTS))
def tests(request):
    center = resolve_owned_center(request.user)
    if request.method == 'GET':
        rows = test_svc.list_tests(center)
        return Response({'success': True, 'data': {
            'tests': [format_test(t) for t in rows],
            'centerName': center.name,
        }})

    s = DiagnosticTestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    test = test_svc.create_test(center, s.to_model_fields())
    return Response(
        {
            'success': True,
            'message': f'Test "{test.name}" added successfully to {center.name}',
            'data': {'test': format_test(test), 'centerInfo': {'id': center.pk, 'name': center.name}},
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes(_gate(Permission.MANAGE_TESTS))
def test_detail(request, test_id):
    center = resolve_owned_center(request.user)
    if request.method == 'DELETE':
        test_svc.soft_delete_test(center, test_id)
        return Response({'success': True, 'message': 'Test deleted successfully'})

    # ownership first: a foreign id is a 404 whatever the payload
    test = test_svc.get_test(center, test_id)
    s = DiagnosticTestSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    test = test_svc.update_test(center, test, s.to_model_fields())
    return Response({'success': True, 'message': 'Test updated successfully', 'data': {'test': format_test(test)}})


# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------
@api_view(['POST'])
@parser_classes([MultiPartParser, FormParser])
@permission_classes(_gate(Permission.UPLOAD_RESULTS))
def upload_results(request):
    center = resolve_owned_center(request.user)
    # ownership first: a foreign id is a 404 whatever the file
    appt = appointment_svc.get_appointment(center, request.data.get('appointmentId'))
    s = ResultUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    appt = appointment_svc.attach_results(appt, vd['file'], vd.get('summary', ''))
    return Response({
        'success': True,
        'message': 'Test results uploaded successfully',
        'data': {'appointment': appointment_svc.format_appointment(appt)},
    })
