"""Reward catalog API routes (read-only)."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from points_ledger.database import get_db
from points_ledger.schemas.reward import RewardOut
from points_ledger.services.reward_catalog import RewardCatalog

router = APIRouter()


@router.get("/", response_model=list[RewardOut])
def list_rewards(location_id: str = Query(...), db: Session = Depends(get_db)):
    """Active rewards for a location, cheapest first."""
    return RewardCatalog(db).list_active(location_id)
