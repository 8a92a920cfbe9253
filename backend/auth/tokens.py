import base64
import binascii
import time
from dataclasses import dataclass

import jwt

from backend.core import config
from backend.errors import InvalidTokenError

MILLIS_PER_HOUR = 60 * 60 * 1000


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    issued_at_ms: int
    stale: bool


def now_millis() -> int:
    return time.time_ns() // 1_000_000


class TokenService:
    """Issues and reads bearer tokens that carry a user id and an issue time.

    The default "opaque" format is plain base64 of ``<userId>:<issuedAtMillis>``.
    It is not signed, so anyone who knows the format can mint a token for any
    user id. The "signed" format keeps the same claims inside an HS256 JWT and
    is opt-in through TOKEN_FORMAT.
    """

    def __init__(
        self,
        token_format: str | None = None,
        secret: str | None = None,
        max_age_hours: int | None = None,
    ):
        self.token_format = token_format or config.TOKEN_FORMAT
        self.secret = secret or config.TOKEN_SECRET
        hours = max_age_hours if max_age_hours is not None else config.TOKEN_MAX_AGE_HOURS
        self.max_age_ms = hours * MILLIS_PER_HOUR

    def issue(self, user_id: str, now_ms: int | None = None) -> str:
        issued_at = now_ms if now_ms is not None else now_millis()
        if self.token_format == "signed":
            payload = {"sub": str(user_id), "iat_ms": issued_at}
            return jwt.encode(payload, self.secret, algorithm=config.TOKEN_ALGORITHM)
        raw = f"{user_id}:{issued_at}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    def validate(self, token: str, now_ms: int | None = None) -> TokenClaims:
        if self.token_format == "signed":
            user_id, issued_at = self._decode_signed(token)
        else:
            user_id, issued_at = self._decode_opaque(token)

        current = now_ms if now_ms is not None else now_millis()
        age = current - issued_at
        return TokenClaims(user_id=user_id, issued_at_ms=issued_at, stale=age > self.max_age_ms)

    def _decode_opaque(self, token: str) -> tuple[str, int]:
        if not token:
            raise InvalidTokenError()
        try:
            decoded = base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError) as exc:
            raise InvalidTokenError() from exc

        user_id, separator, timestamp = decoded.rpartition(":")
        if not separator or not user_id:
            raise InvalidTokenError()
        try:
            issued_at = int(timestamp)
        except ValueError as exc:
            raise InvalidTokenError() from exc
        return user_id, issued_at

    def _decode_signed(self, token: str) -> tuple[str, int]:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[config.TOKEN_ALGORITHM])
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        user_id = payload.get("sub")
        issued_at = payload.get("iat_ms")
        if not user_id or not isinstance(issued_at, int):
            raise InvalidTokenError()
        return str(user_id), issued_at
