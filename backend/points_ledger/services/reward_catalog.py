"""Reward catalog collaborator — read-only lookups consumed by redemption."""
from typing import Optional

from sqlalchemy.orm import Session

from points_ledger.models.reward import Reward


class RewardCatalog:
    """SQL-backed catalog. Redemption only needs ``get_reward``."""

    def __init__(self, db: Session):
        self.db = db

    def get_reward(self, reward_id: str) -> Optional[Reward]:
        return self.db.query(Reward).filter(Reward.reward_id == reward_id).first()

    def list_active(self, location_id: str) -> list[Reward]:
        """Active rewards for a location, cheapest first."""
        return (
            self.db.query(Reward)
            .filter(Reward.location_id == location_id, Reward.active.is_(True))
            .order_by(Reward.points_cost, Reward.reward_name)
            .all()
        )
