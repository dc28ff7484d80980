"""Signed, expiring capability tokens for the upload flow.

Token format: base64(JSON claims) + "." + hex HMAC-SHA256 of the JSON, keyed
with the shared secret. Claims are {"userId", "type", "exp"} with exp in
epoch milliseconds.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from collections.abc import Callable
from dataclasses import dataclass

UPLOAD_PURPOSE = "upload"


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    expires_at_ms: int
    purpose: str = UPLOAD_PURPOSE

    def to_payload(self) -> dict[str, object]:
        return {"userId": self.user_id, "type": self.purpose, "exp": self.expires_at_ms}


def _now_ms() -> int:
    return int(time.time() * 1000)


class SignedTokenCodec:
    """Issues and verifies HMAC-signed tokens. Stateless apart from the secret."""

    def __init__(
        self,
        secret: str,
        ttl_hours: float = 48,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        if not secret:
            raise ValueError("upload_token_secret must be set to issue or verify tokens")
        self._key = secret.encode("utf-8")
        self._ttl_ms = int(ttl_hours * 60 * 60 * 1000)
        self._clock_ms = clock_ms

    def issue(self, user_id: str, purpose: str = UPLOAD_PURPOSE) -> str:
        claims = TokenClaims(
            user_id=user_id,
            expires_at_ms=self._clock_ms() + self._ttl_ms,
            purpose=purpose,
        )
        payload = json.dumps(claims.to_payload(), separators=(",", ":"))
        encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
        return f"{encoded}.{self._sign(payload.encode('utf-8'))}"

    def verify(self, token: str, purpose: str = UPLOAD_PURPOSE) -> TokenClaims | None:
        """Return the claims of a valid, unexpired token, otherwise None."""
        encoded, sep, signature = token.partition(".")
        if not sep or not encoded or not signature:
            return None

        try:
            payload = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            return None

        expected = self._sign(payload).encode("ascii")
        if not hmac.compare_digest(expected, signature.encode("utf-8")):
            return None

        try:
            data = json.loads(payload)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None

        user_id = data.get("userId")
        expires_at = data.get("exp")
        if not isinstance(user_id, str) or not isinstance(expires_at, int):
            return None
        if data.get("type") != purpose:
            return None
        if self._clock_ms() > expires_at:
            return None

        return TokenClaims(user_id=user_id, expires_at_ms=expires_at, purpose=purpose)

    def _sign(self, payload: bytes) -> str:
        return hmac.new(self._key, payload, hashlib.sha256).hexdigest()
