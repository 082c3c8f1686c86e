"""Token Codec: stateless HS256 session tokens.

Invariants:
    - Claims are exactly {user_id, iat, exp}; exp = iat + ttl (24h by default)
    - verify() accepts only HS256: "none", other HMAC sizes and asymmetric
      algorithms are rejected before the signature is looked at
    - Any failure is InvalidTokenError; there is no partial trust
    - Expiry is checked against the injected clock with no leeway: now >= exp rejects

Design Decisions:
    - python-jose for encoding/signature checks; exp presence and expiry are
      checked here instead of by jose so the clock can be injected and the
      boundary is exactly "at expiry" (jose's require_exp re-enables its own
      wall-clock check, so it is not used)
    - Tokens cannot be revoked before exp: no server-side token state exists
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt

from app.core.domain_types import UserId
from app.core.errors import InvalidTokenError

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """Issue and verify signed session tokens."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ):
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, user_id: UserId) -> str:
        issued_at = int(self._clock().timestamp())
        claims = {
            "user_id": str(user_id),
            "iat": issued_at,
            "exp": issued_at + int(self._ttl.total_seconds()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> UserId:
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") != ALGORITHM:
                raise InvalidTokenError()
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "require_iat": True,
                },
            )
        except JWTError as e:
            raise InvalidTokenError() from e

        exp = claims.get("exp")
        if not isinstance(exp, int) or isinstance(exp, bool):
            raise InvalidTokenError()
        if self._clock().timestamp() >= exp:
            raise InvalidTokenError()

        raw_user_id = claims.get("user_id")
        if not isinstance(raw_user_id, str):
            raise InvalidTokenError()
        try:
            return UserId(UUID(raw_user_id))
        except ValueError as e:
            raise InvalidTokenError() from e
