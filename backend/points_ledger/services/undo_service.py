"""Undo service — reverses a recent grant with a compensating event.

The original event stays in the log and is marked with the id of the ``undo``
event that reverses it; the ``undo`` event carries the negated amount. Both
writes share one transaction, so the balance (a plain sum) returns to its
prior value and the positive-only reads skip reversed grants. The marker is
claimed with a conditional UPDATE: when two actors race, exactly one claims it
and the other caller gets NotFoundError with nothing inserted.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from points_ledger.config import settings
from points_ledger.errors import ExpiredWindowError, LedgerError, NotFoundError, ValidationError
from points_ledger.models.point_event import PointEvent, PointSource
from points_ledger.services import ledger_store, roster

logger = logging.getLogger(__name__)


def undo_window() -> timedelta:
    return timedelta(seconds=settings.UNDO_WINDOW_SECONDS)


def is_reversible(source: PointSource) -> bool:
    """Only grants can be undone; debits and compensating events are final."""
    if source in (PointSource.manual_award, PointSource.game_award):
        return True
    if source in (PointSource.redemption, PointSource.undo):
        return False
    raise ValueError(f"Unhandled point source {source!r}")


def within_undo_window(created_at: datetime, now: Optional[datetime] = None) -> bool:
    now = ledger_store.to_utc(now or ledger_store.utcnow())
    return now - ledger_store.to_utc(created_at) < undo_window()


def undo_event(
    db: Session,
    event_id: str,
    reason: str,
    actor_id: str,
    now: Optional[datetime] = None,
) -> PointEvent:
    """Reverse ``event_id`` with a compensating ``undo`` event and return the latter."""
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Please provide a reason for undoing this award")
    now = ledger_store.to_utc(now or ledger_store.utcnow())

    actor = roster.get_active_employee(db, actor_id, role="Actor")

    original = ledger_store.get_event(db, event_id)
    if original is None:
        raise NotFoundError(f"Point event {event_id} not found")
    if original.reversed_by_event_id is not None:
        raise NotFoundError(f"Point event {event_id} was already undone")
    if not is_reversible(original.source):
        raise ValidationError(f"{original.source.value} events cannot be undone")
    if not within_undo_window(original.created_at, now):
        raise ExpiredWindowError(
            f"Point event {event_id} is older than the {settings.UNDO_WINDOW_SECONDS // 60} minute undo window"
        )

    employee_id = original.employee_id
    location_id = original.location_id
    amount = original.amount
    original_awarder = original.awarded_by
    original_created_at = original.created_at
    compensating_id = str(uuid.uuid4())

    try:
        if not ledger_store.mark_reversed(db, event_id, compensating_id):
            raise NotFoundError(f"Point event {event_id} was already undone")
        compensating = ledger_store.insert_event(
            db,
            employee_id=employee_id,
            location_id=location_id,
            amount=-amount,
            source=PointSource.undo,
            source_detail=reason,
            awarded_by=actor.employee_id,
            created_at=now,
            event_id=compensating_id,
        )
        ledger_store.bump_ledger_version(db, employee_id)
        db.commit()
    except LedgerError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Undo of point event %s failed; nothing was applied", event_id)
        raise

    db.refresh(compensating)
    logger.info(
        "Undid point event %s (%+d for %s, awarded by %s at %s) by %s: %s; compensating event %s",
        event_id, amount, employee_id, original_awarder, original_created_at.isoformat(),
        actor.employee_id, reason, compensating.event_id,
    )
    return compensating
