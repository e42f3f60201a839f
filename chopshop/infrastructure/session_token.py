"""Session Token — signs and verifies the JWT that carries the caller's principal.

Invariants:
    - Only the configured HMAC algorithm is accepted on decode (no alg confusion)
    - A token that fails signature, issuer or expiry checks is treated as absent:
      the caller gets a fresh anonymous session, not an error
    - A verified token whose principal claim is malformed IS an error
      (InvalidSessionTokenError), since it was signed by us and is now inconsistent
    - principal claim null means unauthenticated

Design Decisions:
    - PyJWT over hand-rolled HMAC: claim validation (exp/iat/iss) for free
    - Principal lives under a "principal" claim rather than "sub": recent PyJWT
      releases require "sub" to be a string
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import jwt
from pydantic import ValidationError

from chopshop.config import Settings
from chopshop.core.capabilities import Principal
from chopshop.core.errors import InvalidSessionTokenError

logger = logging.getLogger(__name__)

PRINCIPAL_CLAIM = "principal"
VARS_CLAIM = "vars"


class SessionTokenCodec:
    """Issues and reads session tokens for one issuer."""

    def __init__(
        self, secret: str, issuer: str, duration: timedelta, algorithm: str = "HS512",
    ):
        self.secret = secret
        self.issuer = issuer
        self.duration = duration
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionTokenCodec":
        return cls(
            settings.session_secret,
            settings.issuer_name,
            timedelta(seconds=settings.session_duration_seconds),
            settings.session_algorithm,
        )

    def new_claims(self, principal: Principal | None = None) -> dict[str, Any]:
        """Claims for a brand-new session."""
        return {
            "iss": self.issuer,
            "jti": str(uuid4()),
            PRINCIPAL_CLAIM: principal.model_dump() if principal else None,
            VARS_CLAIM: {},
        }

    def issue(self, claims: dict[str, Any]) -> str:
        """Sign ``claims`` with fresh iat/exp."""
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": now, "exp": now + self.duration}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str | None) -> dict[str, Any] | None:
        """Verified claims, or None when there is no usable token."""
        if not token:
            return None
        try:
            return jwt.decode(
                token, self.secret, algorithms=[self.algorithm], issuer=self.issuer,
            )
        except jwt.InvalidTokenError as e:
            logger.info(f"Discarding unusable session token: {e}")
            return None

    def resolve_principal(self, token: str | None) -> Principal | None:
        """Principal carried by ``token``; None for anonymous or unusable tokens."""
        claims = self.decode(token)
        if claims is None:
            return None
        return principal_from_claims(claims)


def principal_from_claims(claims: dict[str, Any]) -> Principal | None:
    raw = claims.get(PRINCIPAL_CLAIM)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise InvalidSessionTokenError("principal claim is not an object")
    try:
        return Principal.model_validate(raw, strict=True)
    except ValidationError as e:
        raise InvalidSessionTokenError(
            f"principal claim failed validation ({e.error_count()} error(s))",
        ) from e
