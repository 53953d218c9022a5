"""
Bearer token codec.

Tokens are HS256 JWTs carrying only the subject (user id), the issue
time and an expiry.  Roles and permissions are never put in the token;
they are re-read from the database on every request by the principal
loader.  The signing secret belongs to the codec instance.
"""
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError


class InvalidToken(Exception):
    """Token is absent, malformed, expired or signed with another secret."""


class TokenCodec:
    def __init__(self, secret: str, *, algorithm: str = 'HS256', lifetime: timedelta = timedelta(days=7)):
        if not secret:
            raise ValueError('token secret must not be empty')
        self.lifetime = lifetime
        self._backend = TokenBackend(algorithm, signing_key=secret)

    def issue(self, subject_id) -> str:
        now = timezone.now()
        payload = {
            'sub': str(subject_id),
            'iat': int(now.timestamp()),
            'exp': int((now + self.lifetime).timestamp()),
        }
        return self._backend.encode(payload)

    def decode(self, token: str | None) -> str:
        """Return the subject id embedded in ``token``.

        Raises :class:`InvalidToken` for a missing token, a bad
        signature, an expired token or a payload without a subject.
        """
        if not token:
            raise InvalidToken('token missing')
        try:
            payload = self._backend.decode(token, verify=True)
        except TokenBackendError as exc:
            raise InvalidToken(str(exc)) from exc
        subject = payload.get('sub')
        if not subject:
            raise InvalidToken('token has no subject')
        return str(subject)


def get_token_codec() -> TokenCodec:
    """Build a codec from the current settings.

    Read at call time so ``override_settings(JWT_SECRET=...)`` rotates
    the secret without any module state to reset.
    """
    return TokenCodec(
        settings.JWT_SECRET,
        algorithm=getattr(settings, 'JWT_ALGORITHM', 'HS256'),
        lifetime=timedelta(minutes=getattr(settings, 'JWT_LIFETIME_MINUTES', 60 * 24 * 7)),
    )
