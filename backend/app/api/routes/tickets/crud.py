"""
Ticket CRUD Routes

Create, read, list, update and delete ticket endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ...deps import get_current_user_dep, get_correlation_id_dep
from ....domain.models import ActorContext, TicketView
from ....services.ticket_service import TicketService
from ....utils.logger import get_logger
from .schemas import UpdateTicketRequest, DeleteTicketResponse

logger = get_logger(__name__)
router = APIRouter()


@router.post("", response_model=TicketView, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    priority: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Create a new ticket

    Multipart form with title, description, category, optional priority
    and up to five images. The ticket starts Open and is owned by the caller.
    """
    service = TicketService()
    # Reject bad fields before writing any image to disk
    service.validate_new_ticket(title, description, category, priority)

    attachments = await service.attachment_service.save_uploads(images or [])
    try:
        ticket = service.create_ticket(
            actor=actor,
            title=title,
            description=description,
            category=category,
            priority=priority,
            attachments=attachments
        )
    except Exception:
        service.attachment_service.remove(attachments)
        raise

    logger.info(
        f"Created ticket: {ticket.ticket_id}",
        extra={
            "ticket_id": ticket.ticket_id,
            "actor_email": actor.email,
            "attachments_count": len(attachments)
        }
    )
    return ticket


@router.get("", response_model=List[TicketView])
async def list_tickets(
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    List tickets, newest first

    Admins get every ticket; other users get only their own.
    """
    service = TicketService()
    return service.list_tickets(actor)


@router.get("/{ticket_id}", response_model=TicketView)
async def get_ticket(
    ticket_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Get ticket details

    Owner and last updater are resolved to name and email; SLA flags are
    computed against the current time.
    """
    service = TicketService()
    return service.get_ticket(actor, ticket_id)


@router.put("/{ticket_id}", response_model=TicketView)
async def update_ticket(
    ticket_id: str,
    request: UpdateTicketRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Update ticket fields

    Owners may edit title, description, category and priority.
    Status and SLA deadline changes are reserved for admins.
    """
    service = TicketService()
    return service.update_ticket(
        actor,
        ticket_id,
        request.model_dump(exclude_unset=True)
    )


@router.delete("/{ticket_id}", response_model=DeleteTicketResponse)
async def delete_ticket(
    ticket_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Delete a ticket permanently"""
    service = TicketService()
    return service.delete_ticket(actor, ticket_id)
