"""Database models package."""

from points_ledger.models.employee import Employee, Title
from points_ledger.models.point_event import PointEvent, PointSource
from points_ledger.models.reward import Reward

__all__ = ["Employee", "Title", "PointEvent", "PointSource", "Reward"]
