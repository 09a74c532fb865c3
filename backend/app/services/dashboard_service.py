"""Dashboard Service - Aggregate ticket metrics for administrators"""
from typing import Optional

from ..domain.models import ActorContext, CategoryCount, DashboardMetrics
from ..domain.enums import TicketStatus
from ..repositories.ticket_repo import TicketRepository
from ..engine.permission_guard import PermissionGuard
from ..engine.sla import warning_window
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class DashboardService:
    """Read-only rollups, recomputed from the ticket store on every call"""

    def __init__(
        self,
        ticket_repo: Optional[TicketRepository] = None,
        permission_guard: Optional[PermissionGuard] = None
    ):
        self.ticket_repo = ticket_repo or TicketRepository()
        self.permission_guard = permission_guard or PermissionGuard()

    def get_metrics(self, actor: ActorContext) -> DashboardMetrics:
        """Get dashboard metrics (admins only)"""
        self.permission_guard.require_admin(actor)

        now = utc_now()
        repo = self.ticket_repo

        # Resolved and Closed stay separate: closing covers irrelevant
        # tickets, resolving covers solved ones
        metrics = DashboardMetrics(
            total_tickets=repo.count_tickets(),
            open_tickets=repo.count_tickets(TicketStatus.OPEN),
            in_progress_tickets=repo.count_tickets(TicketStatus.IN_PROGRESS),
            resolved_tickets=repo.count_tickets(TicketStatus.RESOLVED),
            closed_tickets=repo.count_tickets(TicketStatus.CLOSED),
            breached_tickets=repo.count_breached(now),
            warning_tickets=repo.count_warning(now, warning_window()),
            tickets_by_category=[
                CategoryCount(**row) for row in repo.count_by_category()
            ]
        )

        logger.info(
            f"Dashboard metrics computed: {metrics.total_tickets} tickets",
            extra={"user_id": actor.user_id, "action": "dashboard"}
        )
        return metrics
