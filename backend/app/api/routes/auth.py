"""Auth API Routes - Registration and login"""
from typing import Optional
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from ..deps import get_correlation_id_dep
from ...domain.models import AuthResult
from ...domain.enums import UserRole
from ...services.auth_service import AuthService

router = APIRouter()


class RegisterRequest(BaseModel):
    """Request to create an account"""
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=320)
    password: Optional[str] = None
    role: Optional[UserRole] = None


class LoginRequest(BaseModel):
    """Request to exchange credentials for a token"""
    email: Optional[str] = None
    password: Optional[str] = None


@router.post("/register", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Register a new user

    Returns the profile and a bearer token. Fails with 400 if any field
    is missing or the email is already taken.
    """
    service = AuthService()
    return service.register(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role
    )


@router.post("/login", response_model=AuthResult)
async def login(
    request: LoginRequest,
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Log in with email and password"""
    service = AuthService()
    return service.login(request.email, request.password)
