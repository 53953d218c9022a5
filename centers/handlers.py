"""
Project-wide DRF exception handler.

Every failure leaves the API as the JSON envelope
``{"success": false, "message": ..., "error"?: ...}`` with the HTTP
status of its class.  Unexpected exceptions are logged with their
traceback and reported as a generic 500; the exception text is only
echoed back when ``DEBUG`` is on.

Kept apart from :mod:`centers.exceptions`: importing
``rest_framework.views`` loads the authentication classes, which import
the exception classes.
"""
from __future__ import annotations

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail) -> str:
    """Flatten a DRF error detail into one human readable line."""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _first_message(detail['detail'])
        for field, value in detail.items():
            msg = _first_message(value)
            if field == 'non_field_errors':
                return msg
            return f'{field}: {msg}'
        return 'Invalid request'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid request'
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', getattr(view, '__class__', type(view)).__name__)
        body = {'success': False, 'message': 'Internal server error'}
        if settings.DEBUG:
            body['error'] = str(exc)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # rewrite in place so WWW-Authenticate and friends survive
    resp.data = {'success': False, 'message': _first_message(resp.data)}
    return resp
