"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Session token: short-lived (30min), carries the user's claim set
- Logout token: empty claims, already expired when issued

Tokens are never stored server-side. Logging out hands the client an
expired token to replace its own; the original stays valid until its
natural expiry because there is no revocation list.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import jwt

from usergate.config import Settings
from usergate.errors import InvalidSignature, TokenExpired

# Claims copied from the user record into every session token.
CLAIM_FIELDS = ("id", "account", "name", "mail", "head")


class TokenManager:
    """Signs and verifies tokens with the configured secret."""

    def __init__(self, settings: Settings):
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self.session_ttl = timedelta(minutes=settings.access_token_expire_minutes)
        self.logout_ttl = timedelta(seconds=settings.logout_token_offset_seconds)

    def issue(self, claims: Mapping[str, Any], ttl: timedelta) -> str:
        """Sign `claims` with an expiry of now + ttl."""
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + ttl
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> dict:
        """Verify and decode a token.

        Returns the payload dict on success.
        Raises TokenExpired or InvalidSignature on failure.
        """
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenExpired()
        except jwt.InvalidTokenError as e:
            raise InvalidSignature(f"Invalid token: {e}")

    def issue_session(self, user) -> str:
        """Session token for a user record (password is never a claim)."""
        claims = {field: getattr(user, field) for field in CLAIM_FIELDS}
        return self.issue(claims, self.session_ttl)

    def issue_logout(self) -> str:
        """Empty, pre-expired token telling the client to drop its session."""
        return self.issue({}, self.logout_ttl)
