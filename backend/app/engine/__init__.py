"""Ticket Engine - Authorization rules and SLA derivation"""
from .permission_guard import PermissionGuard
from .sla import is_breached, is_warning, evaluate

__all__ = [
    "PermissionGuard",
    "is_breached",
    "is_warning",
    "evaluate",
]
