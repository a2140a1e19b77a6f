# taskmanager/infra/jwt/pyjwt_token_provider.py
from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import jwt

from taskmanager.core.config import AuthSettings
from taskmanager.models.base import utcnow
from taskmanager.services._shared.errors import ExpiredTokenError, InvalidTokenError
from taskmanager.services._shared.ports import ACCESS, REFRESH, TokenProvider

_REQUIRED_CLAIMS = ["sub", "type", "jti", "iat", "exp"]


@dataclass(slots=True)
class PyJWTTokenProvider(TokenProvider):
    """
    Adapter issuing HS256 JWTs with PyJWT.

    Access tokens are signed with ``settings.access_secret`` and carry the
    role; refresh tokens are signed with ``settings.refresh_secret``. Every
    token gets a random ``jti`` so two tokens minted in the same second are
    still distinct strings.
    """

    settings: AuthSettings
    clock: Callable[[], datetime] = field(default=utcnow)

    def _encode(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = self.clock()
        payload = {
            **claims,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm)

    def _secret_for(self, token_type: str) -> str:
        if token_type == ACCESS:
            return self.settings.access_secret
        if token_type == REFRESH:
            return self.settings.refresh_secret
        raise ValueError(f"Unknown token type: {token_type!r}")

    def issue_access(self, user_id: int, role: str) -> str:
        return self._encode(
            {"sub": str(user_id), "role": role, "type": ACCESS},
            self.settings.access_secret,
            self.settings.access_expires,
        )

    def issue_refresh(self, user_id: int) -> str:
        return self._encode(
            {"sub": str(user_id), "type": REFRESH},
            self.settings.refresh_secret,
            self.settings.refresh_expires,
        )

    def verify(
        self,
        token: str,
        expected_type: str,
        *,
        secret: str | None = None,
    ) -> dict[str, Any]:
        """
        Decode and validate ``token``.

        :param token: Encoded JWT.
        :param expected_type: ``"access"`` or ``"refresh"``; selects the secret
            unless ``secret`` is given, and must match the ``type`` claim.
        :param secret: Explicit verification key.
        :returns: Decoded claims.
        :raises ExpiredTokenError: When the token is past ``exp``.
        :raises InvalidTokenError: On bad signature, malformed input, missing
            claims or a type mismatch.
        """
        key = secret if secret is not None else self._secret_for(expected_type)
        if not token or not isinstance(token, str):
            raise InvalidTokenError()
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                key,
                algorithms=[self.settings.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        if claims.get("type") != expected_type:
            raise InvalidTokenError()
        return claims

