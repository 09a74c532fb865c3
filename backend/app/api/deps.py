"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Header

from ..domain.models import ActorContext
from ..domain.errors import AuthenticationError
from ..services.auth_service import AuthService
from ..utils.jwt import extract_bearer_token
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


async def get_current_user_dep(
    authorization: Optional[str] = Header(None)
) -> ActorContext:
    """
    Dependency to get current user from Authorization header

    Runs before every protected route. Verifies the bearer token and loads
    the user it names; any failure stops the request with 401 before the
    route body runs.

    Raises:
        AuthenticationError: token missing, invalid, expired, or its user is gone
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthenticationError("Not authorized, no token")

    return AuthService().authenticate(token)
