"""Pydantic schemas for point awards, undo, redemption and ledger reads."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, StrictInt


class AwardCreate(BaseModel):
    employee_id: str
    location_id: str
    amount: StrictInt
    reason: str
    awarded_by: str  # acting employee; rank is checked server-side


class GameAwardCreate(BaseModel):
    employee_id: str
    location_id: str
    amount: StrictInt
    game_name: str


class UndoRequest(BaseModel):
    reason: str
    actor_id: str


class RedemptionCreate(BaseModel):
    employee_id: str
    location_id: str
    reward_id: str


class PointEventOut(BaseModel):
    event_id: str
    employee_id: str
    location_id: str
    amount: int
    source: str
    source_detail: Optional[str] = None
    awarded_by: Optional[str] = None
    created_at: datetime
    reversed_by_event_id: Optional[str] = None

    model_config = {"from_attributes": True}


class BalanceOut(BaseModel):
    employee_id: str
    balance: int


class ActivityOut(BaseModel):
    employee_id: str
    balance: int
    since: datetime
    events: list[PointEventOut] = []


class LeaderboardEntry(BaseModel):
    employee_id: str
    display_name: str
    points: int


class LeaderboardOut(BaseModel):
    location_id: str
    window_start: datetime
    window_end: datetime
    entries: list[LeaderboardEntry] = []


class RecentAwardOut(BaseModel):
    event_id: str
    employee_id: str
    employee_name: str
    points: int
    reason: Optional[str] = None
    created_at: datetime
    can_undo: bool


class HistoryEntryOut(BaseModel):
    event_id: str
    employee_id: str
    employee_name: str
    points: int
    source: str
    source_detail: Optional[str] = None
    awarded_by: Optional[str] = None
    awarded_by_name: Optional[str] = None
    created_at: datetime
    can_undo: bool
