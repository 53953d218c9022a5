"""
Bearer token authentication for Django REST framework.

Reads ``Authorization: Bearer <token>``, decodes it with the token
codec and loads the live user record.  Every failure past header
parsing (bad signature, expiry, unknown or deactivated user) surfaces as
the same 401 so callers cannot probe account state.
"""
from __future__ import annotations

import logging

from rest_framework.authentication import BaseAuthentication, get_authorization_header

from centers.exceptions import Unauthenticated
from centers.services.principals import PrincipalInactive, PrincipalNotFound, load_principal
from centers.tokens import InvalidToken, get_token_codec

logger = logging.getLogger(__name__)


class BearerTokenAuthentication(BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None
        if len(auth) != 2:
            logger.debug('Malformed bearer header (%d parts)', len(auth))
            raise Unauthenticated()
        try:
            token = auth[1].decode()
        except UnicodeError:
            raise Unauthenticated()
        return self.authenticate_credentials(token)

    def authenticate_credentials(self, token: str):
        try:
            subject = get_token_codec().decode(token)
            user = load_principal(subject)
        except InvalidToken as exc:
            logger.info('Rejected bearer token: %s', exc)
            raise Unauthenticated()
        except PrincipalNotFound:
            logger.info('Rejected bearer token: unknown subject')
            raise Unauthenticated()
        except PrincipalInactive as exc:
            logger.info('Rejected bearer token: user %s is inactive', exc)
            raise Unauthenticated()
        return user, token

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
