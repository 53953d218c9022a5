"""
Public catalogue endpoints used by the booking screens.

No authentication is required; only active centers and active tests
are ever listed.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from centers.services.catalogue import active_center, active_centers, active_tests_for_center, format_center, format_test


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def list_centers(request):
    qs = active_centers()
    city = (request.query_params.get('city') or '').strip()
    if city:
        qs = qs.filter(city__iexact=city)
    return Response({'success': True, 'data': {'centers': [format_center(c) for c in qs]}})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def center_detail(request, center_id):
    center = active_center(center_id)
    if center is None:
        return Response({'success': False, 'message': 'Diagnostic center not found'},
                        status=status.HTTP_404_NOT_FOUND)
    data = format_center(center)
    data['tests'] = [format_test(t) for t in active_tests_for_center(center.pk)]
    return Response({'success': True, 'data': {'center': data}})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def center_tests(request, center_id):
    center = active_center(center_id)
    if center is None:
        return Response({'success': False, 'message': 'Diagnostic center not found'},
                        status=status.HTTP_404_NOT_FOUND)
    tests = active_tests_for_center(center.pk)
    return Response({'success': True, 'data': {'tests': [format_test(t) for t in tests], 'centerName': center.name}})
