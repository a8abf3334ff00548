"""PointEvent ORM model — the only persisted ledger entity."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, Index, CheckConstraint, Enum as SAEnum
from points_ledger.database import Base


class PointSource(str, enum.Enum):
    manual_award = "manual_award"
    game_award = "game_award"
    redemption = "redemption"
    undo = "undo"


class PointEvent(Base):
    __tablename__ = "point_events"
    __table_args__ = (
        CheckConstraint("amount != 0", name="ck_point_events_amount_nonzero"),
        Index("ix_point_events_location_created", "location_id", "created_at"),
        Index("ix_point_events_employee", "employee_id"),
        Index("ix_point_events_awarded_by_created", "awarded_by", "created_at"),
    )

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), nullable=False)
    location_id = Column(String(36), nullable=False)
    amount = Column(Integer, nullable=False)
    source = Column(SAEnum(PointSource), nullable=False)
    source_detail = Column(String(500), nullable=True)
    awarded_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    # Set once, by the undo that reversed this grant
    reversed_by_event_id = Column(String(36), nullable=True)
