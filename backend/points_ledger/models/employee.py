"""Employee ORM model — roster collaborator, referenced by the ledger."""
import enum
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Integer
from sqlalchemy.sql import func
from points_ledger.database import Base


class Title(str, enum.Enum):
    team_member = "Team Member"
    shift_manager = "Shift Manager"
    assistant_manager = "Assistant Manager"
    general_manager = "General Manager"


class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    location_id = Column(String(36), nullable=False, index=True)
    display_name = Column(String(100), nullable=False)
    # Stored as free text: the roster owns this column, ranks are validated on read
    title = Column(String(50), nullable=False, default=Title.team_member.value)
    active = Column(Boolean, nullable=False, default=True)
    # Bumped by every debit (redemption, undo); compare-and-swap token
    ledger_version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
