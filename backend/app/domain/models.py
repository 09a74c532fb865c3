"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, EmailStr, ConfigDict, field_validator

from .enums import UserRole, TicketStatus, TicketPriority, TicketCategory
from ..utils.time import coerce_utc


# ============================================================================
# Users & Identity
# ============================================================================

class UserRef(BaseModel):
    """Resolved user reference embedded in ticket reads"""
    user_id: str
    name: str
    email: EmailStr


class User(BaseModel):
    """Stored user account"""
    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(..., description="Unique user ID")
    name: str
    email: EmailStr = Field(..., description="Login key, unique")
    password_hash: str = Field(..., description="bcrypt hash")
    role: UserRole = Field(default=UserRole.USER)
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return coerce_utc(value)


class ActorContext(BaseModel):
    """Authenticated caller resolved from the bearer token"""
    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(..., description="User ID embedded in the token")
    name: str
    email: EmailStr
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class AuthResult(BaseModel):
    """Body returned by register and login"""
    id: str
    name: str
    email: EmailStr
    role: UserRole
    token: str


# ============================================================================
# Tickets
# ============================================================================

class Attachment(BaseModel):
    """Stored file reference - content lives on disk"""
    filename: str
    path: str


class TicketResponse(BaseModel):
    """One entry of a ticket's response thread"""
    model_config = ConfigDict(extra="ignore")

    response_id: str
    user_id: str
    message: str
    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_created_at(cls, value):
        return coerce_utc(value)


class Ticket(BaseModel):
    """Stored ticket document"""
    model_config = ConfigDict(extra="ignore")

    ticket_id: str = Field(..., description="Unique ticket ID")
    title: str
    description: str
    category: TicketCategory
    priority: TicketPriority = Field(default=TicketPriority.MEDIUM)
    status: TicketStatus = Field(default=TicketStatus.OPEN)
    resolution_date: Optional[datetime] = Field(None, description="SLA deadline")
    attachments: List[Attachment] = Field(default_factory=list)
    responses: List[TicketResponse] = Field(default_factory=list)
    owner_id: str = Field(..., description="Creating user, never changes")
    last_updated_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("resolution_date", "created_at", "updated_at", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        """Stored datetimes come back naive from some drivers; pin them to UTC"""
        return coerce_utc(value)


class ResponseView(BaseModel):
    """Response with its author resolved"""
    response_id: str
    user: Optional[UserRef] = None
    message: str
    created_at: datetime


class TicketView(BaseModel):
    """Ticket as returned to clients: references resolved, SLA derived"""
    ticket_id: str
    title: str
    description: str
    category: TicketCategory
    priority: TicketPriority
    status: TicketStatus
    resolution_date: Optional[datetime] = None
    attachments: List[Attachment] = Field(default_factory=list)
    responses: List[ResponseView] = Field(default_factory=list)
    owner: Optional[UserRef] = None
    last_updated_by: Optional[UserRef] = None
    created_at: datetime
    updated_at: datetime
    sla_breached: bool = False
    sla_warning: bool = False


# ============================================================================
# Dashboard
# ============================================================================

class CategoryCount(BaseModel):
    category: str
    count: int


class DashboardMetrics(BaseModel):
    """Point-in-time ticket rollups for administrators"""
    total_tickets: int
    open_tickets: int
    in_progress_tickets: int
    resolved_tickets: int
    closed_tickets: int
    breached_tickets: int
    warning_tickets: int
    tickets_by_category: List[CategoryCount] = Field(default_factory=list)
