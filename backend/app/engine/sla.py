"""SLA Evaluation - Breach and warning flags derived from ticket state

Nothing here is persisted: the flags are recomputed on every read so they
always agree with the current status and the caller's clock.
"""
from datetime import datetime, timedelta
from typing import Optional, Tuple

from ..config.settings import settings
from ..domain.models import Ticket
from ..domain.enums import TERMINAL_STATUSES
from ..utils.time import coerce_utc, utc_now


def _open_deadline(ticket: Ticket) -> Optional[datetime]:
    """Deadline of a ticket that is still on the SLA clock, else None"""
    if ticket.resolution_date is None or ticket.status in TERMINAL_STATUSES:
        return None
    return coerce_utc(ticket.resolution_date)


def is_breached(ticket: Ticket, now: Optional[datetime] = None) -> bool:
    """Open ticket whose deadline has passed"""
    deadline = _open_deadline(ticket)
    if deadline is None:
        return False
    now = coerce_utc(now or utc_now())
    return now > deadline


def is_warning(
    ticket: Ticket,
    now: Optional[datetime] = None,
    window: Optional[timedelta] = None
) -> bool:
    """Open ticket due within the warning window and not yet breached"""
    deadline = _open_deadline(ticket)
    if deadline is None:
        return False
    now = coerce_utc(now or utc_now())
    window = window if window is not None else warning_window()
    remaining = deadline - now
    return timedelta(0) < remaining <= window


def evaluate(
    ticket: Ticket,
    now: Optional[datetime] = None,
    window: Optional[timedelta] = None
) -> Tuple[bool, bool]:
    """Return (breached, warning) for one instant"""
    now = coerce_utc(now or utc_now())
    return is_breached(ticket, now), is_warning(ticket, now, window)


def warning_window() -> timedelta:
    """Configured lead time before a deadline that raises a warning"""
    return timedelta(hours=settings.sla_warning_hours)
