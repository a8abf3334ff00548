"""Reward catalog ORM model — read-only from the ledger's perspective."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Integer, CheckConstraint
from sqlalchemy.sql import func
from points_ledger.database import Base


class Reward(Base):
    __tablename__ = "points_rewards"
    __table_args__ = (CheckConstraint("points_cost > 0", name="ck_points_rewards_cost_positive"),)

    reward_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    location_id = Column(String(36), nullable=False, index=True)
    reward_name = Column(String(150), nullable=False)
    points_cost = Column(Integer, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
