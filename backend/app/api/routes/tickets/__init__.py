"""
Ticket Routes Module

Ticket API endpoints organized by functionality:

- crud.py: Create, list, get, update and delete tickets
- responses.py: Conversation thread on a ticket

All routes are combined into a single router for inclusion in the API.
"""

from fastapi import APIRouter

from .schemas import UpdateTicketRequest, DeleteTicketResponse, AddResponseRequest
from .crud import router as crud_router
from .responses import router as responses_router

router = APIRouter()

router.include_router(crud_router, prefix="/tickets")
router.include_router(responses_router, prefix="/tickets")

__all__ = [
    "router",
    # Schemas
    "UpdateTicketRequest", "DeleteTicketResponse", "AddResponseRequest"
]
