"""
Authentication views.

Patients register themselves; every user logs in with email and
password and receives a bearer token.  The token only identifies the
user: role and permissions are re-read on each request by
:class:`centers.authentication.BearerTokenAuthentication`.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from centers.exceptions import UNAUTHENTICATED_MESSAGE, ValidationFailed
from centers.models import Role, User
from centers.permissions import IsActivePrincipal
from centers.serializers.auth import LoginSerializer, RegisterSerializer
from centers.services.staff import format_user
from centers.tokens import get_token_codec

logger = logging.getLogger(__name__)


def _token_payload(user: User) -> dict:
    codec = get_token_codec()
    return {
        'token': codec.issue(user.pk),
        'expiresIn': int(codec.lifetime.total_seconds()),
        'user': format_user(user),
    }


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register_view(request):
    """Self-registration; always creates a patient."""
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    if User.objects.filter(email__iexact=vd['email']).exists():
        raise ValidationFailed('User already exists with this email')
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=vd['email'],
                password=vd['password'],
                name=vd['name'],
                phone=vd.get('phone', ''),
                role=Role.PATIENT,
            )
    except IntegrityError:
        raise ValidationFailed('User already exists with this email')
    logger.info('Registered patient %s', user.pk)
    return Response(
        {'success': True, 'message': 'Registration successful', 'data': _token_payload(user)},
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    # ModelBackend refuses inactive users, so they land here as well
    user = authenticate(request, email=vd['email'], password=vd['password'])
    if user is None:
        logger.info('Failed login for %s', vd['email'])
        return Response({'success': False, 'message': UNAUTHENTICATED_MESSAGE}, status=status.HTTP_401_UNAUTHORIZED)

    return Response({'success': True, 'message': 'Login successful', 'data': _token_payload(user)})


@api_view(['GET'])
@permission_classes([IsActivePrincipal])
def me_view(request):
    user = request.user
    data = format_user(user)
    center = getattr(user, 'owned_center', None) if user.role == Role.DIAGNOSTIC_CENTER_ADMIN else None
    data['ownedCenterId'] = center.pk if center else None
    return Response({'success': True, 'data': data})
