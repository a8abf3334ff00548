"""Pydantic schemas for the reward catalog."""
from pydantic import BaseModel


class RewardOut(BaseModel):
    reward_id: str
    location_id: str
    reward_name: str
    points_cost: int
    active: bool

    model_config = {"from_attributes": True}
