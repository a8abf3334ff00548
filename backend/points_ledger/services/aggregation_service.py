"""Aggregation engine — read models over the point event log.

Balance and leaderboards are independent views of the same log:
- balance: net sum of every event, what an employee can spend
- leaderboards: positive amounts only, what an employee earned in a window

They are not expected to agree. Every read goes to the store; nothing is cached.
"""
import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

import pytz
from sqlalchemy.orm import Session

from points_ledger.config import settings
from points_ledger.models.point_event import PointEvent, PointSource
from points_ledger.services import ledger_store, roster
from points_ledger.services.undo_service import is_reversible, within_undo_window

UNKNOWN_EMPLOYEE = "Unknown"


def _ledger_tz():
    return pytz.timezone(settings.LEDGER_TIMEZONE)


def _local_span(first_day: date, last_day: date) -> tuple[datetime, datetime]:
    """[first_day 00:00, last_day 23:59:59.999999] in the ledger timezone, returned as UTC."""
    tz = _ledger_tz()
    start = tz.localize(datetime.combine(first_day, time.min))
    end = tz.localize(datetime.combine(last_day, time.max))
    return ledger_store.to_utc(start), ledger_store.to_utc(end)


def current_week_bounds(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Monday through Sunday of the week containing ``now``."""
    local_today = ledger_store.to_utc(now or ledger_store.utcnow()).astimezone(_ledger_tz()).date()
    monday = local_today - timedelta(days=local_today.weekday())
    return _local_span(monday, monday + timedelta(days=6))


def current_month_bounds(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    local_today = ledger_store.to_utc(now or ledger_store.utcnow()).astimezone(_ledger_tz()).date()
    last = calendar.monthrange(local_today.year, local_today.month)[1]
    return _local_span(local_today.replace(day=1), local_today.replace(day=last))


def get_balance(db: Session, employee_id: str) -> int:
    return ledger_store.balance_for_employee(db, employee_id)


def get_leaderboard(
    db: Session,
    location_id: str,
    window_start: datetime,
    window_end: datetime,
) -> list[dict[str, Any]]:
    """Positive-only point totals per employee, highest first, ties by employee id."""
    totals = ledger_store.positive_totals(db, location_id, window_start, window_end)
    names = roster.display_names(db, location_id)
    totals.sort(key=lambda row: (-row[1], row[0]))
    return [
        {
            "employee_id": employee_id,
            "display_name": names.get(employee_id, UNKNOWN_EMPLOYEE),
            "points": points,
        }
        for employee_id, points in totals
    ]


def weekly_leaderboard(
    db: Session,
    location_id: str,
    week_start: Optional[datetime] = None,
    week_end: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> tuple[datetime, datetime, list[dict[str, Any]]]:
    """Leaderboard for the given week, defaulting to the current one."""
    if week_start is None or week_end is None:
        week_start, week_end = current_week_bounds(now)
    return week_start, week_end, get_leaderboard(db, location_id, week_start, week_end)


def monthly_leaderboard(
    db: Session,
    location_id: str,
    month_start: Optional[datetime] = None,
    month_end: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> tuple[datetime, datetime, list[dict[str, Any]]]:
    if month_start is None or month_end is None:
        month_start, month_end = current_month_bounds(now)
    return month_start, month_end, get_leaderboard(db, location_id, month_start, month_end)


def get_recent_awards(
    db: Session,
    actor_id: str,
    location_id: str,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """The actor's latest manual awards at a location, each flagged with can_undo."""
    limit = settings.RECENT_AWARDS_LIMIT if limit is None else limit
    now = ledger_store.to_utc(now or ledger_store.utcnow())
    names = roster.display_names(db, location_id)
    return [
        {
            "event_id": event.event_id,
            "employee_id": event.employee_id,
            "employee_name": names.get(event.employee_id, UNKNOWN_EMPLOYEE),
            "points": event.amount,
            "reason": event.source_detail,
            "created_at": ledger_store.to_utc(event.created_at),
            "can_undo": within_undo_window(event.created_at, now),
        }
        for event in ledger_store.recent_manual_awards(db, actor_id, location_id, limit)
    ]


def points_history(
    db: Session,
    location_id: str,
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
    source: Optional[PointSource] = None,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Every positive grant at a location, newest first, with names resolved."""
    now = ledger_store.to_utc(now or ledger_store.utcnow())
    names = roster.display_names(db, location_id)
    events = ledger_store.positive_events_for_location(db, location_id, window_start, window_end, source)
    return [
        {
            "event_id": event.event_id,
            "employee_id": event.employee_id,
            "employee_name": names.get(event.employee_id, UNKNOWN_EMPLOYEE),
            "points": event.amount,
            "source": event.source.value,
            "source_detail": event.source_detail,
            "awarded_by": event.awarded_by,
            "awarded_by_name": names.get(event.awarded_by, UNKNOWN_EMPLOYEE) if event.awarded_by else None,
            "created_at": ledger_store.to_utc(event.created_at),
            "can_undo": is_reversible(event.source) and within_undo_window(event.created_at, now),
        }
        for event in events
    ]


def employee_activity(
    db: Session,
    employee_id: str,
    since: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Spendable balance plus the employee's log since ``since`` (default: start of this week)."""
    if since is None:
        since, _ = current_week_bounds(now)
    events: list[PointEvent] = ledger_store.events_for_employee(db, employee_id, since)
    return {
        "employee_id": employee_id,
        "balance": ledger_store.balance_for_employee(db, employee_id),
        "since": ledger_store.to_utc(since),
        "events": events,
    }
