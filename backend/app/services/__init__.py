"""Service modules - Business logic layer"""
from .auth_service import AuthService
from .ticket_service import TicketService
from .attachment_service import AttachmentService
from .dashboard_service import DashboardService

__all__ = [
    "AuthService",
    "TicketService",
    "AttachmentService",
    "DashboardService",
]
