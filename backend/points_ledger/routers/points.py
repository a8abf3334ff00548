"""Points API routes — delegates to the ledger services for invariant enforcement."""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from points_ledger.database import get_db
from points_ledger.models.point_event import PointSource
from points_ledger.schemas.points import (
    ActivityOut, AwardCreate, BalanceOut, GameAwardCreate, HistoryEntryOut,
    LeaderboardOut, PointEventOut, RecentAwardOut, RedemptionCreate, UndoRequest,
)
from points_ledger.services import aggregation_service, award_service, redemption_service, undo_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/awards", response_model=PointEventOut, status_code=status.HTTP_201_CREATED)
def award_points(payload: AwardCreate, db: Session = Depends(get_db)):
    """Award points to a lower-ranked employee."""
    return award_service.award_points(
        db=db,
        employee_id=payload.employee_id,
        location_id=payload.location_id,
        amount=payload.amount,
        reason=payload.reason,
        awarded_by=payload.awarded_by,
    )


@router.post("/game-awards", response_model=PointEventOut, status_code=status.HTTP_201_CREATED)
def record_game_award(payload: GameAwardCreate, db: Session = Depends(get_db)):
    """Credit points won in an in-store game."""
    return award_service.record_game_award(
        db=db,
        employee_id=payload.employee_id,
        location_id=payload.location_id,
        amount=payload.amount,
        game_name=payload.game_name,
    )


@router.post("/events/{event_id}/undo", response_model=PointEventOut)
def undo_event(event_id: str, payload: UndoRequest, db: Session = Depends(get_db)):
    """Reverse a grant made within the undo window; returns the compensating event."""
    return undo_service.undo_event(db=db, event_id=event_id, reason=payload.reason, actor_id=payload.actor_id)


@router.post("/redemptions", response_model=PointEventOut, status_code=status.HTTP_201_CREATED)
def redeem_reward(payload: RedemptionCreate, db: Session = Depends(get_db)):
    """Spend points on a catalog reward."""
    return redemption_service.redeem(
        db=db,
        employee_id=payload.employee_id,
        location_id=payload.location_id,
        reward_id=payload.reward_id,
    )


@router.get("/balance/{employee_id}", response_model=BalanceOut)
def get_balance(employee_id: str, db: Session = Depends(get_db)):
    return {"employee_id": employee_id, "balance": aggregation_service.get_balance(db, employee_id)}


@router.get("/activity/{employee_id}", response_model=ActivityOut)
def get_activity(
    employee_id: str,
    since: Optional[datetime] = Query(None, description="Defaults to the start of the current week"),
    db: Session = Depends(get_db),
):
    """Balance plus the employee's recent ledger entries."""
    return aggregation_service.employee_activity(db, employee_id, since=since)


@router.get("/leaderboard", response_model=LeaderboardOut)
def get_leaderboard(
    location_id: str = Query(...),
    window_start: datetime = Query(...),
    window_end: datetime = Query(...),
    db: Session = Depends(get_db),
):
    """Points earned (positive entries only) per employee within a window."""
    entries = aggregation_service.get_leaderboard(db, location_id, window_start, window_end)
    return {"location_id": location_id, "window_start": window_start, "window_end": window_end, "entries": entries}


@router.get("/leaderboard/weekly", response_model=LeaderboardOut)
def get_weekly_leaderboard(
    location_id: str = Query(...),
    week_start: Optional[datetime] = Query(None),
    week_end: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
):
    start, end, entries = aggregation_service.weekly_leaderboard(db, location_id, week_start, week_end)
    return {"location_id": location_id, "window_start": start, "window_end": end, "entries": entries}


@router.get("/leaderboard/monthly", response_model=LeaderboardOut)
def get_monthly_leaderboard(
    location_id: str = Query(...),
    month_start: Optional[datetime] = Query(None),
    month_end: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
):
    start, end, entries = aggregation_service.monthly_leaderboard(db, location_id, month_start, month_end)
    return {"location_id": location_id, "window_start": start, "window_end": end, "entries": entries}


@router.get("/recent-awards", response_model=list[RecentAwardOut])
def get_recent_awards(
    actor_id: str = Query(..., description="Employee whose awards to list"),
    location_id: str = Query(...),
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: Session = Depends(get_db),
):
    """The actor's latest manual awards, each flagged with whether it can still be undone."""
    return aggregation_service.get_recent_awards(db, actor_id, location_id, limit=limit)


@router.get("/history", response_model=list[HistoryEntryOut])
def get_history(
    location_id: str = Query(...),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    source: Optional[PointSource] = Query(None),
    db: Session = Depends(get_db),
):
    """All grants at a location, newest first, optionally filtered by window and source."""
    return aggregation_service.points_history(db, location_id, start, end, source)
