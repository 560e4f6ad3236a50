"""
Signed, time-limited bearer tokens.

Tokens are itsdangerous ``URLSafeTimedSerializer`` blobs (HMAC-signed) so:
- Claims can't be forged or tampered with
- Tokens expire after ``ttl_hours`` (checked with ``max_age`` on load)

There is no server-side revocation; expiry is the only way a token stops
working.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from pydantic import BaseModel

from studio_cms.models.user import User
from studio_cms.utils.logger import get_logger

logger = get_logger(__name__)

TOKEN_SALT = "studio-cms-auth-token"


class TokenClaims(BaseModel):
    """Identity carried inside a verified token"""

    id: int
    username: str
    email: Optional[str] = None
    role: str
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class TokenService:
    """Issues and verifies bearer tokens for authenticated users"""

    def __init__(self, secret: str, ttl_hours: int = 24):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self.ttl = timedelta(hours=ttl_hours)
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=TOKEN_SALT)

    def issue(self, user: User) -> str:
        payload: Dict[str, Any] = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "role": user.role,
        }
        return self._serializer.dumps(payload)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """
        Check signature and expiry.

        Returns:
            The token's claims, or None when the token is malformed, forged or
            expired. The reason is not reported to the caller.
        """
        if not token:
            return None
        try:
            data, issued_at = self._serializer.loads(
                token,
                max_age=int(self.ttl.total_seconds()),
                return_timestamp=True,
            )
        except SignatureExpired:
            logger.debug("Token expired")
            return None
        except BadSignature:
            logger.debug("Token signature rejected")
            return None

        if not isinstance(data, dict) or "id" not in data or "role" not in data:
            return None

        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=timezone.utc)
        try:
            return TokenClaims(
                id=data["id"],
                username=data.get("username", ""),
                email=data.get("email"),
                role=data["role"],
                issued_at=issued_at,
                expires_at=issued_at + self.ttl,
            )
        except ValueError:
            return None
