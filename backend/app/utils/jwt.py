"""Access Tokens - Issue and verify signed, time-limited identity tokens"""
import jwt
from typing import Any, Dict, Optional
from datetime import timedelta

from ..config.settings import settings
from ..domain.errors import TokenExpiredError, TokenInvalidError
from .time import utc_now
from .logger import get_logger

logger = get_logger(__name__)


class AccessTokenService:
    """
    HS256 token issuer/verifier

    Stateless: the token embeds the user id and an expiry. The signing
    secret is handed in by the caller so tests can run with their own;
    rotating it invalidates every outstanding token.
    """

    def __init__(
        self,
        secret: str,
        expires_days: int = 15,
        algorithm: str = "HS256"
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = timedelta(days=expires_days)

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, user_id: str) -> str:
        """
        Issue a token for a user

        Args:
            user_id: ID to embed in the token

        Returns:
            Encoded token string
        """
        now = utc_now()
        payload = {
            "id": user_id,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Validate a token and return its claims

        Raises:
            TokenExpiredError: If the token has expired
            TokenInvalidError: If signature or structure is invalid
        """
        if not token:
            raise TokenInvalidError("Token is missing")

        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "id"]}
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise TokenExpiredError("Token has expired")
        except jwt.PyJWTError as e:
            logger.warning(f"JWT validation error: {e}")
            raise TokenInvalidError("Invalid token")

    def verify(self, token: str) -> str:
        """
        Verify a token and return the embedded user id

        Raises:
            TokenExpiredError / TokenInvalidError
        """
        claims = self.decode(token)
        user_id = claims.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise TokenInvalidError("Token does not identify a user")
        return user_id


# Global token service instance
_token_service: Optional[AccessTokenService] = None


def get_token_service() -> AccessTokenService:
    """Get global token service built from settings"""
    global _token_service
    if _token_service is None:
        _token_service = AccessTokenService(
            secret=settings.jwt_secret,
            expires_days=settings.jwt_expires_days,
            algorithm=settings.jwt_algorithm
        )
    return _token_service


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an Authorization header value

    Returns None when the header is absent or not a Bearer credential.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
