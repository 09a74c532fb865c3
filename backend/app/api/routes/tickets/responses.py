"""
Ticket Response Routes

Conversation thread on a ticket.
"""

from fastapi import APIRouter, Depends

from ...deps import get_current_user_dep, get_correlation_id_dep
from ....domain.models import ActorContext, TicketView
from ....services.ticket_service import TicketService
from .schemas import AddResponseRequest

router = APIRouter()


@router.post("/{ticket_id}/responses", response_model=TicketView)
async def add_response(
    ticket_id: str,
    request: AddResponseRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Add a response to a ticket

    Open to the ticket owner and admins. Returns the ticket with its
    full thread, oldest message first.
    """
    service = TicketService()
    return service.add_response(actor, ticket_id, request.message)
