"""Auth Service - Registration, login and token resolution"""
from typing import Optional, Tuple
import bcrypt
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..domain.models import User, ActorContext, AuthResult
from ..domain.enums import UserRole
from ..domain.errors import (
    AuthenticationError, InvalidTokenError, InvalidCredentialsError,
    EmailAlreadyRegisteredError, ValidationError
)
from ..repositories.user_repo import UserRepository
from ..config.settings import settings
from ..utils.jwt import AccessTokenService, get_token_service
from ..utils.idgen import generate_user_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

_email_adapter = TypeAdapter(EmailStr)


def _require_valid_email(email: str) -> str:
    """Return the lower-cased address or raise ValidationError"""
    try:
        _email_adapter.validate_python(email)
    except PydanticValidationError:
        raise ValidationError(
            "Please enter a valid email address",
            details={"field": "email"}
        )
    return email.strip().lower()


class AuthService:
    """Service for authentication and credential management"""

    def __init__(
        self,
        user_repo: Optional[UserRepository] = None,
        token_service: Optional[AccessTokenService] = None
    ):
        self.user_repo = user_repo or UserRepository()
        self.token_service = token_service or get_token_service()

    # =========================================================================
    # Passwords
    # =========================================================================

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verify password against hash.

        Returns:
            True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8"),
                hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    # =========================================================================
    # Register / Login
    # =========================================================================

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[UserRole] = None
    ) -> AuthResult:
        """Create an account and issue its first token"""
        name = (name or "").strip()
        email = (email or "").strip().lower()
        password = password or ""

        missing = [
            field for field, value in (("name", name), ("email", email), ("password", password))
            if not value
        ]
        if missing:
            raise ValidationError(
                "Please add all fields",
                details={"missing": missing}
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                details={"field": "password"}
            )
        email = _require_valid_email(email)

        if self.user_repo.email_exists(email):
            logger.info("Registration rejected: email already registered")
            raise EmailAlreadyRegisteredError(
                "User already exists",
                details={"email": email}
            )

        user = self._create_user(name, email, password, role or UserRole.USER)
        return self._auth_result(user)

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """Check credentials and issue a token"""
        user = self.user_repo.get_user_by_email(email or "") if email else None

        if not user or not password or not self.verify_password(password, user.password_hash):
            logger.info("Login failed", extra={"action": "login"})
            raise InvalidCredentialsError("Invalid email or password")

        logger.info(f"User logged in: {user.user_id}", extra={"user_id": user.user_id, "action": "login"})
        return self._auth_result(user)

    def ensure_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole
    ) -> Tuple[User, bool]:
        """
        Get-or-create an account by email

        Returns:
            (user, created)
        """
        email = _require_valid_email(email)
        existing = self.user_repo.get_user_by_email(email)
        if existing:
            return existing, False
        return self._create_user(name, email, password, role), True

    # =========================================================================
    # Token Resolution
    # =========================================================================

    def authenticate(self, token: Optional[str]) -> ActorContext:
        """
        Resolve a bearer token to the calling user

        Raises:
            AuthenticationError: No token, or its user no longer exists
            InvalidTokenError: Token malformed, expired or badly signed
        """
        if not token:
            raise AuthenticationError("Not authorized, no token")

        try:
            user_id = self.token_service.verify(token)
        except InvalidTokenError as e:
            logger.info(f"Rejected token: {type(e).__name__}")
            raise InvalidTokenError("Not authorized, token failed")

        user = self.user_repo.get_user(user_id)
        if not user:
            logger.info("Rejected token for unknown user", extra={"user_id": user_id})
            raise AuthenticationError("Not authorized, token failed")

        return ActorContext(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _create_user(self, name: str, email: str, password: str, role: UserRole) -> User:
        now = utc_now()
        user = User(
            user_id=generate_user_id(),
            name=name,
            email=email,
            password_hash=self.hash_password(password),
            role=role,
            created_at=now,
            updated_at=now
        )
        return self.user_repo.create_user(user)

    def _auth_result(self, user: User) -> AuthResult:
        return AuthResult(
            id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            token=self.token_service.issue(user.user_id)
        )
