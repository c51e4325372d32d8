"""HS256 JWT implementation of IdentityProvider."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import jwt
import structlog

from cidade_alerta.core.errors import AuthenticationError

if TYPE_CHECKING:
    from cidade_alerta.auth.base import UserDirectory

log = structlog.get_logger()

TOKEN_TTL = timedelta(days=14)


def _strip_bearer(credential: str) -> str:
    scheme, _, token = credential.strip().partition(" ")
    if token:
        if scheme.lower() != "bearer":
            raise AuthenticationError("unsupported authorization scheme")
        return token.strip()
    return scheme


class JwtIdentityProvider:
    """Verifies signed tokens whose ``sub`` claim is the user id."""

    def __init__(self, secret: str, users: UserDirectory, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._users = users

    def issue_token(self, user_id: str, ttl: timedelta = TOKEN_TTL) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": user_id, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, credential: str | None) -> str:
        if not credential:
            raise AuthenticationError("authentication required")
        token = _strip_bearer(credential)
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            log.info("auth_failed", reason="expired")
            raise AuthenticationError("token expired") from None
        except jwt.InvalidTokenError as exc:
            log.info("auth_failed", reason=str(exc))
            raise AuthenticationError("invalid token") from None

        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationError("token has no subject")
        return str(user_id)

    def is_authority(self, user_id: str) -> bool:
        return self._users.is_authority(user_id)
