"""
Tenant scoping for center administrators.

An admin owns exactly one :class:`DiagnosticCenter`.  Admin-facing views
resolve that center first and then pass it to :func:`scoped` or
:func:`resolve_child_scoped`, which add the parent filter to every
query.  Nothing below this module checks tenancy again, so a view that
skips it can read other centers' rows.
"""
import logging

from django.db.models import QuerySet

from centers.exceptions import NoOwnedResource, NotFoundOrForbidden
from centers.models import DiagnosticCenter, User

logger = logging.getLogger(__name__)


def resolve_owned_center(principal: User) -> DiagnosticCenter:
    center = DiagnosticCenter.objects.filter(admin_id=principal.pk).first()
    if center is None:
        logger.info('User %s owns no diagnostic center', principal.pk)
        raise NoOwnedResource()
    return center


def scoped(queryset: QuerySet, center: DiagnosticCenter, *, field: str = 'diagnostic_center') -> QuerySet:
    return queryset.filter(**{f'{field}_id': center.pk})


def resolve_child_scoped(source, center_id, child_id, *, field: str = 'diagnostic_center'):
    """Fetch one child row that belongs to ``center_id``.

    ``source`` is a model class or a queryset (to keep ``select_related``
    hydration).  A missing row, an unparseable id and a row of another
    center all raise the same :class:`NotFoundOrForbidden`.
    """
    queryset = source if isinstance(source, QuerySet) else source._default_manager.all()
    try:
        pk = int(child_id)
    except (TypeError, ValueError):
        raise NotFoundOrForbidden()
    child = queryset.filter(pk=pk, **{f'{field}_id': center_id}).first()
    if child is None:
        logger.info('%s %s not found in center %s', queryset.model.__name__, child_id, center_id)
        raise NotFoundOrForbidden()
    return child
