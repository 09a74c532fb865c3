"""Ticket Repository - Data access for tickets and their response threads"""
from typing import Any, Dict, List, Optional
from datetime import datetime, timedelta
from enum import Enum
from pymongo.collection import Collection
from pymongo import DESCENDING, ReturnDocument

from .mongo_client import get_collection
from ..domain.models import Ticket, TicketResponse
from ..domain.enums import TicketStatus, TERMINAL_STATUSES
from ..domain.errors import TicketNotFoundError
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

_OPEN_STATUS_FILTER = {"$nin": [s.value for s in TERMINAL_STATUSES]}


def _plain(value: Any) -> Any:
    """Store enums by value so queries can match on plain strings"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


class TicketRepository:
    """Repository for ticket operations"""

    def __init__(self):
        self._tickets: Collection = get_collection("tickets")

    # =========================================================================
    # Ticket CRUD
    # =========================================================================

    def create_ticket(self, ticket: Ticket) -> Ticket:
        """Create a new ticket"""
        # Don't use mode="json" - it converts datetime to strings, breaking MongoDB sorting
        doc = _plain(ticket.model_dump())
        doc["_id"] = ticket.ticket_id

        self._tickets.insert_one(doc)
        logger.info(f"Created ticket: {ticket.ticket_id}", extra={"ticket_id": ticket.ticket_id})
        return ticket

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID"""
        doc = self._tickets.find_one({"ticket_id": ticket_id})
        if doc:
            doc.pop("_id", None)
            return Ticket.model_validate(doc)
        return None

    def get_ticket_or_raise(self, ticket_id: str) -> Ticket:
        """Get ticket by ID or raise error"""
        ticket = self.get_ticket(ticket_id)
        if not ticket:
            raise TicketNotFoundError(
                "Ticket not found",
                details={"ticket_id": ticket_id}
            )
        return ticket

    def update_ticket(self, ticket_id: str, updates: Dict[str, Any]) -> Ticket:
        """
        Apply a field update

        Last writer wins: there is no version check, two concurrent
        updates to the same field simply overwrite each other.
        """
        updates = _plain(dict(updates))
        updates.setdefault("updated_at", utc_now())

        result = self._tickets.find_one_and_update(
            {"ticket_id": ticket_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )

        if result is None:
            raise TicketNotFoundError(
                "Ticket not found",
                details={"ticket_id": ticket_id}
            )

        result.pop("_id", None)
        logger.info(f"Updated ticket: {ticket_id}", extra={"ticket_id": ticket_id})
        return Ticket.model_validate(result)

    def push_response(self, ticket_id: str, response: TicketResponse) -> Ticket:
        """
        Append to the response thread

        A single $push keeps concurrent appends from losing each other;
        entries land in the order the server applies them.
        """
        result = self._tickets.find_one_and_update(
            {"ticket_id": ticket_id},
            {
                "$push": {"responses": _plain(response.model_dump())},
                "$set": {
                    "last_updated_by_id": response.user_id,
                    "updated_at": response.created_at,
                },
            },
            return_document=ReturnDocument.AFTER
        )

        if result is None:
            raise TicketNotFoundError(
                "Ticket not found",
                details={"ticket_id": ticket_id}
            )

        result.pop("_id", None)
        logger.info(
            f"Added response {response.response_id} to ticket {ticket_id}",
            extra={"ticket_id": ticket_id, "user_id": response.user_id}
        )
        return Ticket.model_validate(result)

    def delete_ticket(self, ticket_id: str) -> bool:
        """Permanently remove a ticket"""
        result = self._tickets.delete_one({"ticket_id": ticket_id})
        if result.deleted_count:
            logger.info(f"Deleted ticket: {ticket_id}", extra={"ticket_id": ticket_id})
        return result.deleted_count > 0

    def list_tickets(self, owner_id: Optional[str] = None) -> List[Ticket]:
        """List tickets newest first, optionally only those of one owner"""
        query: Dict[str, Any] = {}
        if owner_id:
            query["owner_id"] = owner_id

        cursor = self._tickets.find(query).sort(
            [("created_at", DESCENDING), ("ticket_id", DESCENDING)]
        )

        tickets = []
        for doc in cursor:
            doc.pop("_id", None)
            tickets.append(Ticket.model_validate(doc))

        return tickets

    # =========================================================================
    # Aggregates
    # =========================================================================

    def count_tickets(self, status: Optional[TicketStatus] = None) -> int:
        """Count tickets, optionally by status"""
        query = {"status": status.value} if status else {}
        return self._tickets.count_documents(query)

    def count_breached(self, now: datetime) -> int:
        """Count open tickets whose deadline has passed"""
        return self._tickets.count_documents({
            "status": _OPEN_STATUS_FILTER,
            "resolution_date": {"$ne": None, "$lt": now},
        })

    def count_warning(self, now: datetime, window: timedelta) -> int:
        """Count open tickets whose deadline falls within (now, now + window]"""
        return self._tickets.count_documents({
            "status": _OPEN_STATUS_FILTER,
            "resolution_date": {"$ne": None, "$gt": now, "$lte": now + window},
        })

    def count_by_category(self) -> List[Dict[str, Any]]:
        """Ticket counts grouped by category"""
        pipeline = [
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ]
        return [
            {"category": row["_id"], "count": row["count"]}
            for row in self._tickets.aggregate(pipeline)
        ]
