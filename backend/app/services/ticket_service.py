"""Ticket Service - Ticket lifecycle business logic"""
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar
from datetime import datetime
from enum import Enum

from ..domain.models import (
    Ticket, TicketResponse, TicketView, ResponseView, Attachment, ActorContext
)
from ..domain.enums import TicketStatus, TicketPriority, TicketCategory
from ..domain.errors import ValidationError, TicketNotFoundError
from ..repositories.ticket_repo import TicketRepository
from ..repositories.user_repo import UserRepository
from ..engine.permission_guard import PermissionGuard
from ..engine import sla
from .attachment_service import AttachmentService
from ..utils.idgen import generate_ticket_id, generate_response_id
from ..utils.time import utc_now, coerce_utc
from ..utils.logger import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)

TEXT_FIELDS = ("title", "description")


def _parse_enum(enum_cls: Type[E], value: Any, field: str) -> E:
    """Coerce a raw value into an enum member or raise ValidationError"""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(
            f"Invalid {field}: {value!r}",
            details={"field": field, "allowed": [m.value for m in enum_cls]}
        )


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(
            "Please add all fields",
            details={"field": field}
        )
    return str(value).strip()


def _parse_deadline(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    try:
        deadline = coerce_utc(value)
    except (ValueError, OverflowError):
        deadline = None
    if not isinstance(deadline, datetime):
        raise ValidationError(
            f"Invalid resolution_date: {value!r}",
            details={"field": "resolution_date"}
        )
    return deadline


class TicketService:
    """Service for ticket operations"""

    def __init__(
        self,
        ticket_repo: Optional[TicketRepository] = None,
        user_repo: Optional[UserRepository] = None,
        permission_guard: Optional[PermissionGuard] = None,
        attachment_service: Optional[AttachmentService] = None
    ):
        self.ticket_repo = ticket_repo or TicketRepository()
        self.user_repo = user_repo or UserRepository()
        self.permission_guard = permission_guard or PermissionGuard()
        self.attachment_service = attachment_service or AttachmentService()

    # =========================================================================
    # Create
    # =========================================================================

    def validate_new_ticket(
        self,
        title: Optional[str],
        description: Optional[str],
        category: Optional[str],
        priority: Optional[str] = None
    ) -> Dict[str, Any]:
        """Normalize creation fields, raising ValidationError on bad input"""
        missing = [
            field for field, value in (
                ("title", title), ("description", description), ("category", category)
            )
            if value is None or not str(value).strip()
        ]
        if missing:
            raise ValidationError(
                "Please add all fields",
                details={"missing": missing}
            )

        return {
            "title": str(title).strip(),
            "description": str(description).strip(),
            "category": _parse_enum(TicketCategory, category, "category"),
            "priority": (
                _parse_enum(TicketPriority, priority, "priority")
                if priority else TicketPriority.MEDIUM
            ),
        }

    def create_ticket(
        self,
        actor: ActorContext,
        title: Optional[str],
        description: Optional[str],
        category: Optional[str],
        priority: Optional[str] = None,
        attachments: Optional[List[Attachment]] = None
    ) -> TicketView:
        """Open a new ticket owned by the caller"""
        fields = self.validate_new_ticket(title, description, category, priority)
        now = utc_now()

        ticket = Ticket(
            ticket_id=generate_ticket_id(),
            status=TicketStatus.OPEN,
            attachments=attachments or [],
            owner_id=actor.user_id,
            created_at=now,
            updated_at=now,
            **fields
        )
        self.ticket_repo.create_ticket(ticket)

        logger.info(
            f"Ticket {ticket.ticket_id} opened",
            extra={"ticket_id": ticket.ticket_id, "user_id": actor.user_id, "action": "create"}
        )
        return self.to_view(ticket, now=now)

    # =========================================================================
    # Read
    # =========================================================================

    def get_ticket(self, actor: ActorContext, ticket_id: str) -> TicketView:
        """Get one ticket the caller owns (or any ticket for admins)"""
        ticket = self.ticket_repo.get_ticket_or_raise(ticket_id)
        self.permission_guard.require_ticket_access(actor, ticket, "view")
        return self.to_view(ticket)

    def list_tickets(self, actor: ActorContext) -> List[TicketView]:
        """
        List tickets newest first

        Admins see every ticket; everyone else only sees their own.
        """
        owner_id = None if actor.is_admin else actor.user_id
        tickets = self.ticket_repo.list_tickets(owner_id=owner_id)
        return self.to_views(tickets)

    # =========================================================================
    # Update / Delete
    # =========================================================================

    def update_ticket(
        self,
        actor: ActorContext,
        ticket_id: str,
        changes: Dict[str, Any]
    ) -> TicketView:
        """
        Apply a partial update

        Only keys present in changes are written. Passing resolution_date as
        None clears the deadline.
        """
        ticket = self.ticket_repo.get_ticket_or_raise(ticket_id)
        self.permission_guard.require_ticket_access(actor, ticket, "update")
        self.permission_guard.require_editable_fields(actor, changes.keys())

        updates = self._normalize_changes(changes)
        updates["last_updated_by_id"] = actor.user_id
        updates["updated_at"] = utc_now()

        updated = self.ticket_repo.update_ticket(ticket_id, updates)

        logger.info(
            f"Ticket {ticket_id} updated: {sorted(changes.keys())}",
            extra={"ticket_id": ticket_id, "user_id": actor.user_id, "action": "update"}
        )
        return self.to_view(updated)

    def delete_ticket(self, actor: ActorContext, ticket_id: str) -> Dict[str, str]:
        """Permanently delete a ticket; there is no undo"""
        ticket = self.ticket_repo.get_ticket_or_raise(ticket_id)
        self.permission_guard.require_ticket_access(actor, ticket, "delete")

        if not self.ticket_repo.delete_ticket(ticket_id):
            raise TicketNotFoundError(
                "Ticket not found",
                details={"ticket_id": ticket_id}
            )

        if ticket.attachments:
            self.attachment_service.remove(ticket.attachments)

        logger.info(
            f"Ticket {ticket_id} deleted",
            extra={"ticket_id": ticket_id, "user_id": actor.user_id, "action": "delete"}
        )
        return {"id": ticket_id}

    # =========================================================================
    # Responses
    # =========================================================================

    def add_response(
        self,
        actor: ActorContext,
        ticket_id: str,
        message: Optional[str]
    ) -> TicketView:
        """Append a message to the ticket's thread"""
        text = _require_text(message, "message")

        ticket = self.ticket_repo.get_ticket_or_raise(ticket_id)
        self.permission_guard.require_ticket_access(actor, ticket, "respond")

        response = TicketResponse(
            response_id=generate_response_id(),
            user_id=actor.user_id,
            message=text,
            created_at=utc_now()
        )
        updated = self.ticket_repo.push_response(ticket_id, response)
        return self.to_view(updated)

    # =========================================================================
    # Views
    # =========================================================================

    def to_view(self, ticket: Ticket, now: Optional[datetime] = None) -> TicketView:
        """Resolve references and derive SLA flags for one ticket"""
        return self.to_views([ticket], now=now)[0]

    def to_views(
        self,
        tickets: Iterable[Ticket],
        now: Optional[datetime] = None
    ) -> List[TicketView]:
        """Resolve references for many tickets with a single user lookup"""
        tickets = list(tickets)
        now = coerce_utc(now or utc_now())

        user_ids = set()
        for ticket in tickets:
            user_ids.add(ticket.owner_id)
            if ticket.last_updated_by_id:
                user_ids.add(ticket.last_updated_by_id)
            user_ids.update(r.user_id for r in ticket.responses)
        refs = self.user_repo.get_refs(user_ids)

        views = []
        for ticket in tickets:
            breached, warning = sla.evaluate(ticket, now)
            views.append(TicketView(
                ticket_id=ticket.ticket_id,
                title=ticket.title,
                description=ticket.description,
                category=ticket.category,
                priority=ticket.priority,
                status=ticket.status,
                resolution_date=ticket.resolution_date,
                attachments=ticket.attachments,
                responses=[
                    ResponseView(
                        response_id=r.response_id,
                        user=refs.get(r.user_id),
                        message=r.message,
                        created_at=r.created_at
                    )
                    for r in ticket.responses
                ],
                owner=refs.get(ticket.owner_id),
                last_updated_by=refs.get(ticket.last_updated_by_id) if ticket.last_updated_by_id else None,
                created_at=ticket.created_at,
                updated_at=ticket.updated_at,
                sla_breached=breached,
                sla_warning=warning
            ))
        return views

    # =========================================================================
    # Helpers
    # =========================================================================

    def _normalize_changes(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        updates: Dict[str, Any] = {}
        for field, value in changes.items():
            if field in TEXT_FIELDS:
                updates[field] = _require_text(value, field)
            elif field == "category":
                updates[field] = _parse_enum(TicketCategory, value, field)
            elif field == "priority":
                updates[field] = _parse_enum(TicketPriority, value, field)
            elif field == "status":
                updates[field] = _parse_enum(TicketStatus, value, field)
            elif field == "resolution_date":
                updates[field] = _parse_deadline(value)
        return updates
