"""Ledger store — append-mostly access to the point_events table.

Responsibilities:
- Enforce the per-source sign rules on every insert
- Unique lookup by event id and compare-and-set of the reversal marker
- Range queries by (location_id, created_at) and by employee_id
- Per-employee ledger version compare-and-swap for read-modify-write debits

Nothing here commits; callers own the transaction.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from points_ledger.errors import ValidationError
from points_ledger.models.employee import Employee
from points_ledger.models.point_event import PointEvent, PointSource


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize to aware UTC. Naive values (SQLite round-trips) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _check_amount_sign(source: PointSource, amount: int) -> None:
    if source in (PointSource.manual_award, PointSource.game_award):
        valid = amount > 0
    elif source == PointSource.redemption:
        valid = amount < 0
    elif source == PointSource.undo:
        valid = amount != 0
    else:
        raise ValueError(f"Unhandled point source {source!r}")
    if not valid:
        raise ValidationError(f"Amount {amount} is not valid for a {source.value} event")


def _check_awarder(source: PointSource, awarded_by: Optional[str]) -> None:
    if source in (PointSource.manual_award, PointSource.undo):
        if not awarded_by:
            raise ValidationError(f"A {source.value} event requires an acting employee")
    elif source in (PointSource.game_award, PointSource.redemption):
        if awarded_by is not None:
            raise ValidationError(f"A {source.value} event cannot carry an awarder")
    else:
        raise ValueError(f"Unhandled point source {source!r}")


def insert_event(
    db: Session,
    employee_id: str,
    location_id: str,
    amount: int,
    source: PointSource,
    source_detail: Optional[str],
    awarded_by: Optional[str],
    created_at: datetime,
    event_id: Optional[str] = None,
) -> PointEvent:
    """Stage a new event in the session and flush it."""
    _check_amount_sign(source, amount)
    _check_awarder(source, awarded_by)
    event = PointEvent(
        employee_id=employee_id,
        location_id=location_id,
        amount=amount,
        source=source,
        source_detail=source_detail,
        awarded_by=awarded_by,
        created_at=to_utc(created_at),
    )
    if event_id is not None:
        event.event_id = event_id
    db.add(event)
    db.flush()
    return event


def get_event(db: Session, event_id: str) -> Optional[PointEvent]:
    return db.query(PointEvent).filter(PointEvent.event_id == event_id).first()


def mark_reversed(db: Session, event_id: str, reversed_by_event_id: str) -> bool:
    """Compare-and-set the reversal marker: True only for the caller whose UPDATE claimed it."""
    updated = (
        db.query(PointEvent)
        .filter(
            PointEvent.event_id == event_id,
            PointEvent.reversed_by_event_id.is_(None),
        )
        .update({PointEvent.reversed_by_event_id: reversed_by_event_id}, synchronize_session=False)
    )
    return updated == 1


def claim_ledger_version(db: Session, employee_id: str, expected_version: int) -> bool:
    """Advance the employee's ledger version iff it still equals ``expected_version``."""
    updated = (
        db.query(Employee)
        .filter(
            Employee.employee_id == employee_id,
            Employee.ledger_version == expected_version,
        )
        .update({Employee.ledger_version: expected_version + 1}, synchronize_session=False)
    )
    return updated == 1


def bump_ledger_version(db: Session, employee_id: str) -> None:
    """Unconditionally advance the version so in-flight debits for this employee retry."""
    db.query(Employee).filter(Employee.employee_id == employee_id).update(
        {Employee.ledger_version: Employee.ledger_version + 1}, synchronize_session=False
    )


def balance_for_employee(db: Session, employee_id: str) -> int:
    total = (
        db.query(func.coalesce(func.sum(PointEvent.amount), 0))
        .filter(PointEvent.employee_id == employee_id)
        .scalar()
    )
    return int(total)


def events_for_employee(
    db: Session,
    employee_id: str,
    since: Optional[datetime] = None,
) -> list[PointEvent]:
    """Newest-first events for one employee, optionally from ``since`` onward."""
    query = db.query(PointEvent).filter(PointEvent.employee_id == employee_id)
    if since is not None:
        query = query.filter(PointEvent.created_at >= to_utc(since))
    return query.order_by(PointEvent.created_at.desc(), PointEvent.event_id).all()


def positive_totals(
    db: Session,
    location_id: str,
    window_start: datetime,
    window_end: datetime,
) -> list[tuple[str, int]]:
    """Per-employee sums of live positive amounts with created_at in [start, end]."""
    rows = (
        db.query(PointEvent.employee_id, func.sum(PointEvent.amount))
        .filter(
            PointEvent.location_id == location_id,
            PointEvent.amount > 0,
            PointEvent.reversed_by_event_id.is_(None),
            PointEvent.created_at >= to_utc(window_start),
            PointEvent.created_at <= to_utc(window_end),
        )
        .group_by(PointEvent.employee_id)
        .all()
    )
    return [(employee_id, int(points)) for employee_id, points in rows]


def positive_events_for_location(
    db: Session,
    location_id: str,
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
    source: Optional[PointSource] = None,
) -> list[PointEvent]:
    query = db.query(PointEvent).filter(
        PointEvent.location_id == location_id,
        PointEvent.amount > 0,
        PointEvent.reversed_by_event_id.is_(None),
    )
    if window_start is not None:
        query = query.filter(PointEvent.created_at >= to_utc(window_start))
    if window_end is not None:
        query = query.filter(PointEvent.created_at <= to_utc(window_end))
    if source is not None:
        query = query.filter(PointEvent.source == source)
    return query.order_by(PointEvent.created_at.desc(), PointEvent.event_id).all()


def recent_manual_awards(
    db: Session,
    awarded_by: str,
    location_id: str,
    limit: int,
) -> list[PointEvent]:
    return (
        db.query(PointEvent)
        .filter(
            PointEvent.awarded_by == awarded_by,
            PointEvent.location_id == location_id,
            PointEvent.source == PointSource.manual_award,
            PointEvent.reversed_by_event_id.is_(None),
        )
        .order_by(PointEvent.created_at.desc(), PointEvent.event_id)
        .limit(limit)
        .all()
    )
