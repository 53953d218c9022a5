"""
API error taxonomy.

Each class carries the HTTP status and message it is rendered with by
:func:`centers.handlers.api_exception_handler`.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed

UNAUTHENTICATED_MESSAGE = 'Access denied. Invalid or expired credentials.'
NO_TOKEN_MESSAGE = 'Access denied. No token provided.'
FORBIDDEN_MESSAGE = 'Access denied. Insufficient permissions.'
NOT_FOUND_MESSAGE = 'Resource not found'
NO_CENTER_MESSAGE = 'No diagnostic center found for this admin'


class Unauthenticated(AuthenticationFailed):
    """401 with a WWW-Authenticate challenge; one message for every cause."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = UNAUTHENTICATED_MESSAGE
    default_code = 'unauthenticated'


class Forbidden(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = FORBIDDEN_MESSAGE
    default_code = 'forbidden'


class NotFoundOrForbidden(APIException):
    """Child resource is missing or belongs to another center.

    The two cases share one status and one message.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = NOT_FOUND_MESSAGE
    default_code = 'not_found'


class NoOwnedResource(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = NO_CENTER_MESSAGE
    default_code = 'no_owned_resource'


class ValidationFailed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request'
    default_code = 'validation_error'
