import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from pydantic import BaseModel

from aggregation.core.config import Settings
from aggregation.core.exceptions import AuthenticationError, ConfigurationError
from aggregation.core.logging import get_logger

logger = get_logger(__name__)


class IssuedToken(BaseModel):
    """A signed bearer token and the moment it stops being valid."""
    token: str
    expires_at: datetime


class JwtTokenHandler:
    """Issues and validates HS256 bearer tokens for API clients."""

    def __init__(
        self,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the token handler.

        Args:
            settings: Application settings holding credentials and JWT options
            clock: Optional UTC clock, used in tests
        """
        self.settings = settings
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def secret_key(self) -> str:
        secret = self.settings.JWT_SECRET_KEY
        if not secret:
            raise ConfigurationError(
                detail="JWT secret key is not configured",
                context={"setting": "JWT_SECRET_KEY"}
            )
        return secret

    def verify_credentials(self, username: Optional[str], password: Optional[str]) -> bool:
        """Compare the supplied credentials with the configured ones."""
        return (
            hmac.compare_digest(username or "", self.settings.JWT_USERNAME)
            and hmac.compare_digest(password or "", self.settings.JWT_PASSWORD)
        )

    def issue_token(self, username: str) -> IssuedToken:
        """
        Create a signed token for ``username``.

        Raises:
            ConfigurationError: If no signing secret is configured
        """
        secret = self.secret_key
        now = self.clock()
        expires = now + timedelta(minutes=self.settings.TOKEN_EXPIRATION_MINUTES)

        payload = {
            "sub": username,
            "name": username,
            "iss": self.settings.JWT_ISSUER,
            "aud": self.settings.JWT_AUDIENCE,
            "iat": now,
            "exp": expires,
        }
        token = jwt.encode(payload, secret, algorithm=self.settings.JWT_ALGORITHM)
        logger.info(f"Issued token for user {username}")
        return IssuedToken(token=token, expires_at=expires)

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify a bearer token.

        Returns:
            Dict[str, Any]: The token claims

        Raises:
            AuthenticationError: If the token is expired or invalid
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.settings.JWT_ALGORITHM],
                audience=self.settings.JWT_AUDIENCE,
                issuer=self.settings.JWT_ISSUER,
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Rejected expired bearer token")
            raise AuthenticationError(detail="Token has expired", code="token_expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected invalid bearer token: {str(e)}")
            raise AuthenticationError(detail="Invalid token", code="invalid_token")
