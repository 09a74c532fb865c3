"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection
from .user_repo import UserRepository
from .ticket_repo import TicketRepository

__all__ = [
    "get_database",
    "get_collection",
    "UserRepository",
    "TicketRepository",
]
