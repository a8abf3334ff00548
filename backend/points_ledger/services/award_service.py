"""Award service — manager and game point grants.

Responsibilities:
- Input validation: whole positive amounts, non-blank reasons
- Roster checks: actor and target exist, are active, target belongs to the location
- Rank hierarchy: actor must strictly outrank the target
- Writes exactly one positive event per call
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from points_ledger.errors import LedgerError, PermissionDeniedError, ValidationError
from points_ledger.models.point_event import PointEvent, PointSource
from points_ledger.services import ledger_store, ranks, roster

logger = logging.getLogger(__name__)


def _validate_amount(amount) -> int:
    # bool is an int subclass; True must not read as one point
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("Points must be a whole number")
    if amount < 1:
        raise ValidationError("Points must be at least 1")
    return amount


def _validate_text(value: Optional[str], message: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def award_points(
    db: Session,
    employee_id: str,
    location_id: str,
    amount: int,
    reason: str,
    awarded_by: str,
    now: Optional[datetime] = None,
) -> PointEvent:
    """Grant ``amount`` points to an employee on behalf of a higher-ranked actor."""
    amount = _validate_amount(amount)
    reason = _validate_text(reason, "Please provide a reason for the points")

    actor = roster.get_active_employee(db, awarded_by, role="Actor")
    target = roster.get_active_employee(db, employee_id, location_id=location_id)

    if not ranks.can_award(actor.title, target.title):
        raise PermissionDeniedError(
            f"{actor.title} cannot award points to {target.title}; target must be lower ranked"
        )

    try:
        event = ledger_store.insert_event(
            db,
            employee_id=target.employee_id,
            location_id=location_id,
            amount=amount,
            source=PointSource.manual_award,
            source_detail=reason,
            awarded_by=actor.employee_id,
            created_at=now or ledger_store.utcnow(),
        )
        db.commit()
    except LedgerError:
        db.rollback()
        raise
    db.refresh(event)
    logger.info(
        "Awarded %d points to %s at %s by %s (event %s)",
        amount, target.employee_id, location_id, actor.employee_id, event.event_id,
    )
    return event


def record_game_award(
    db: Session,
    employee_id: str,
    location_id: str,
    amount: int,
    game_name: str,
    now: Optional[datetime] = None,
) -> PointEvent:
    """Credit points won in an in-store game. No awarder, so no rank check."""
    amount = _validate_amount(amount)
    game_name = _validate_text(game_name, "Game awards must name the game")
    target = roster.get_active_employee(db, employee_id, location_id=location_id)

    try:
        event = ledger_store.insert_event(
            db,
            employee_id=target.employee_id,
            location_id=location_id,
            amount=amount,
            source=PointSource.game_award,
            source_detail=game_name,
            awarded_by=None,
            created_at=now or ledger_store.utcnow(),
        )
        db.commit()
    except LedgerError:
        db.rollback()
        raise
    db.refresh(event)
    logger.info("Game '%s' awarded %d points to %s (event %s)", game_name, amount, employee_id, event.event_id)
    return event
