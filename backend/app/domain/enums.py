"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class UserRole(str, Enum):
    """Account role - fixed at creation"""
    USER = "user"
    ADMIN = "admin"


class TicketStatus(str, Enum):
    """Ticket lifecycle status"""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class TicketPriority(str, Enum):
    """Ticket priority"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TicketCategory(str, Enum):
    """Support category selected by the requester"""
    HARDWARE = "Hardware"
    SOFTWARE = "Software"
    NETWORK = "Network"
    ACCESS = "Access"
    OTHER = "Other"


# Statuses that stop the SLA clock
TERMINAL_STATUSES = frozenset({TicketStatus.RESOLVED, TicketStatus.CLOSED})
