import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from centers.models import User

logger = logging.getLogger(__name__)


class PrincipalNotFound(Exception):
    pass


class PrincipalInactive(Exception):
    pass


def load_principal(subject_id) -> User:
    """Resolve a token subject into an active user.

    The center relation is fetched in the same query.  Stamping
    ``last_login`` is best-effort: a database error there is logged and
    swallowed so it never fails the request.
    """
    try:
        pk = int(subject_id)
    except (TypeError, ValueError):
        raise PrincipalNotFound(subject_id)
    user = User.objects.select_related('diagnostic_center').filter(pk=pk).first()
    if user is None:
        raise PrincipalNotFound(subject_id)
    if not user.is_active:
        raise PrincipalInactive(subject_id)

    now = timezone.now()
    try:
        with transaction.atomic():
            User.objects.filter(pk=user.pk).update(last_login=now)
        user.last_login = now
    except DatabaseError:
        logger.warning('Could not update last seen for user %s', user.pk, exc_info=True)
    return user
