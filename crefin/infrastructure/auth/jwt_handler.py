"""
JWT token handler.
Validates bearer tokens issued by the upstream identity provider and
extracts the owner ID they carry.
"""

from typing import Dict, Any, Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, ExpiredSignatureError, jwt

from crefin.config import get_settings
from crefin.domain.models.base import ValidationError


class JWTHandler:
    """Handles JWT token validation and user extraction."""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        settings = get_settings()
        self.jwt_secret = secret or settings.jwt_secret_key
        self.jwt_algorithm = algorithm or settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Raises:
            ValidationError: If the token is invalid, expired or has no subject
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_aud": False}
            )
        except ExpiredSignatureError as e:
            raise ValidationError("Token has expired", "token") from e
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {e}", "token") from e

        if not payload.get('sub'):
            raise ValidationError("Token missing user ID (sub claim)", "token")

        return payload

    def get_user_id(self, token: str) -> str:
        """Extract the owner ID (``sub`` claim) from a token."""
        return self.verify_token(token)['sub']

    def generate_token(self, user_id: str, email: Optional[str] = None, expires_minutes: int = 60) -> str:
        """Issue a signed token. Used by local tooling and tests."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
        }
        if email:
            payload["email"] = email

        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
