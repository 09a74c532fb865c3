"""
Ticket Schemas

Request and response models for ticket API endpoints.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ....domain.enums import TicketStatus, TicketPriority, TicketCategory
from ....utils.time import coerce_utc


# =============================================================================
# Ticket CRUD Schemas
# =============================================================================

class UpdateTicketRequest(BaseModel):
    """
    Partial ticket update

    Only fields present in the body are applied. Sending
    resolution_date as null (or an empty string) clears the deadline.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)
    category: Optional[TicketCategory] = None
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    resolution_date: Optional[datetime] = Field(None, description="SLA deadline")

    @field_validator("resolution_date", mode="before")
    @classmethod
    def parse_resolution_date(cls, v):
        """Accept plain dates from date pickers as well as full timestamps"""
        return coerce_utc(v)


class DeleteTicketResponse(BaseModel):
    """Response after deleting ticket"""
    id: str


# =============================================================================
# Response Thread Schemas
# =============================================================================

class AddResponseRequest(BaseModel):
    """Request to add a message to the ticket thread"""
    message: Optional[str] = Field(None, max_length=5000)
