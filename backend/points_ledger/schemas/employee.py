"""Pydantic schemas for roster employees."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from points_ledger.models.employee import Title


class EmployeeCreate(BaseModel):
    location_id: str
    display_name: str
    title: Title = Title.team_member
    active: bool = True


class EmployeeOut(BaseModel):
    employee_id: str
    location_id: str
    display_name: str
    title: str
    active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
