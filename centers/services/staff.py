import logging
import secrets

from django.db import IntegrityError, transaction

from centers.exceptions import ValidationFailed
from centers.models import DiagnosticCenter, User
from centers.services.scoping import resolve_child_scoped, scoped

logger = logging.getLogger(__name__)


def format_user(user: User) -> dict:
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'phone': user.phone,
        'role': user.role,
        'isActive': user.is_active,
        'permissions': sorted(user.permissions or []),
        'centerId': user.diagnostic_center_id,
        'lastLogin': user.last_login.isoformat() if user.last_login else None,
    }


def list_staff(center: DiagnosticCenter):
    return scoped(User.objects.filter(is_active=True), center).order_by('name', 'id')


def add_staff(center: DiagnosticCenter, *, name, email, phone='', role, password=None):
    """Create a user bound to ``center``.

    Returns ``(user, initial_password)``; the password is generated when
    the admin did not supply one.
    """
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationFailed('User already exists with this email')
    password = password or secrets.token_urlsafe(12)
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name,
                phone=phone or '',
                role=role,
                diagnostic_center=center,
            )
    except IntegrityError:
        # lost a race against another insert of the same email
        raise ValidationFailed('User already exists with this email')
    logger.info('Center %s added staff member %s (%s)', center.pk, user.pk, user.role)
    return user, password


def deactivate_staff(center: DiagnosticCenter, staff_id, *, actor: User) -> User:
    user = resolve_child_scoped(User, center.pk, staff_id)
    if user.pk == actor.pk or user.pk == center.admin_id:
        raise ValidationFailed('You cannot deactivate the center owner')
    if user.is_active:
        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info('Center %s deactivated staff member %s', center.pk, user.pk)
    return user
