"""Permission Guard - Authorization enforcement for ticket actions"""
from typing import Iterable

from ..domain.models import Ticket, ActorContext
from ..domain.errors import PermissionDeniedError
from ..utils.logger import get_logger

logger = get_logger(__name__)


# Fields an owner may change on their own ticket; admins may change all of them
OWNER_EDITABLE_FIELDS = frozenset({"title", "description", "category", "priority"})
ADMIN_EDITABLE_FIELDS = OWNER_EDITABLE_FIELDS | {"status", "resolution_date"}


class PermissionGuard:
    """
    Permission enforcement for ticket operations

    Rules:
    - Owners can view, update (limited fields), delete and respond to their own tickets
    - Admins can do all of that on any ticket
    - Only admins can read dashboard metrics
    """

    def is_owner(self, actor: ActorContext, ticket: Ticket) -> bool:
        return ticket.owner_id == actor.user_id

    def can_access_ticket(self, actor: ActorContext, ticket: Ticket) -> bool:
        """Owner-or-admin rule shared by get, update, delete and respond"""
        return actor.is_admin or self.is_owner(actor, ticket)

    def require_ticket_access(self, actor: ActorContext, ticket: Ticket, action: str) -> None:
        if not self.can_access_ticket(actor, ticket):
            logger.warning(
                f"Denied {action} on ticket {ticket.ticket_id} for {actor.user_id}",
                extra={"ticket_id": ticket.ticket_id, "user_id": actor.user_id, "action": action}
            )
            raise PermissionDeniedError(
                "Not authorized",
                details={"ticket_id": ticket.ticket_id}
            )

    def require_editable_fields(self, actor: ActorContext, fields: Iterable[str]) -> None:
        """Reject updates touching fields outside the caller's role"""
        allowed = ADMIN_EDITABLE_FIELDS if actor.is_admin else OWNER_EDITABLE_FIELDS
        blocked = sorted(set(fields) - allowed)
        if blocked:
            raise PermissionDeniedError(
                "Not authorized to change these fields",
                details={"fields": blocked}
            )

    def require_admin(self, actor: ActorContext) -> None:
        if not actor.is_admin:
            raise PermissionDeniedError("Not authorized as an admin")

