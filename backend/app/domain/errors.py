"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Authentication & Authorization Errors
class AuthenticationError(DomainError):
    """Authentication required (no credentials or unknown user)"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class InvalidTokenError(AuthenticationError):
    """Token malformed, expired, or signed with another secret

    Shares the AUTHENTICATION_ERROR code so clients cannot tell a bad
    token from a deleted user.
    """


class TokenExpiredError(InvalidTokenError):
    """Token expiration passed"""


class TokenInvalidError(InvalidTokenError):
    """Token signature or structure invalid"""


class InvalidCredentialsError(AuthenticationError):
    """Email/password pair did not match"""
    error_code = "INVALID_CREDENTIALS"


class AuthorizationError(DomainError):
    """User lacks permission for action"""
    error_code = "AUTHORIZATION_ERROR"
    http_status = 401


class PermissionDeniedError(AuthorizationError):
    """Caller is neither the owner nor an admin"""
    error_code = "NOT_AUTHORIZED"


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class TicketNotFoundError(NotFoundError):
    """Ticket not found"""
    error_code = "TICKET_NOT_FOUND"



# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class EmailAlreadyRegisteredError(ConflictError):
    """Registration with an email that already exists"""
    error_code = "USER_ALREADY_EXISTS"
    http_status = 400


# Attachment Errors
class AttachmentError(DomainError):
    """Attachment related error"""
    error_code = "ATTACHMENT_ERROR"


class AttachmentTooLargeError(AttachmentError):
    """Attachment exceeds max size"""
    error_code = "ATTACHMENT_TOO_LARGE"
    http_status = 413


class InvalidMimeTypeError(AttachmentError):
    """File type not allowed"""
    error_code = "INVALID_MIME_TYPE"
    http_status = 400
