"""Dashboard API Routes - Admin ticket metrics"""
from fastapi import APIRouter, Depends

from ..deps import get_current_user_dep, get_correlation_id_dep
from ...domain.models import ActorContext, DashboardMetrics
from ...services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=DashboardMetrics)
async def get_dashboard(
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Get ticket metrics

    Admin only. Counts by status, SLA breaches and warnings, and a
    per-category breakdown sorted by category name.
    """
    service = DashboardService()
    return service.get_metrics(actor)
