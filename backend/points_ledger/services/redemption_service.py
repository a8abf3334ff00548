"""Redemption service — spends points against the reward catalog.

The balance check and the debit run as one unit per employee: the employee's
``ledger_version`` is read before the balance and claimed with a
compare-and-swap before the debit is written. A concurrent debit for the same
employee advances the version, so the loser rolls back and re-checks against
the fresh balance. The balance is always read from the ledger, never cached.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from points_ledger.config import settings
from points_ledger.errors import ConflictError, InsufficientBalanceError, LedgerError, NotFoundError
from points_ledger.models.point_event import PointEvent, PointSource
from points_ledger.models.reward import Reward
from points_ledger.services import ledger_store, roster
from points_ledger.services.reward_catalog import RewardCatalog

logger = logging.getLogger(__name__)


def _redeemable_reward(catalog: RewardCatalog, reward_id: str, location_id: str) -> Reward:
    reward = catalog.get_reward(reward_id)
    if reward is None or not reward.active:
        raise NotFoundError(f"Reward {reward_id} not found or inactive")
    if reward.location_id != location_id:
        raise NotFoundError(f"Reward {reward_id} is not offered at location {location_id}")
    return reward


def redeem(
    db: Session,
    employee_id: str,
    location_id: str,
    reward_id: str,
    catalog: Optional[RewardCatalog] = None,
    now: Optional[datetime] = None,
) -> PointEvent:
    """Debit the reward's cost from the employee's balance and return the debit event."""
    catalog = catalog or RewardCatalog(db)
    reward = _redeemable_reward(catalog, reward_id, location_id)
    cost = reward.points_cost
    reward_name = reward.reward_name

    for attempt in range(1, settings.REDEMPTION_MAX_ATTEMPTS + 1):
        try:
            employee = roster.get_active_employee(db, employee_id, location_id=location_id)
            expected_version = employee.ledger_version
            balance = ledger_store.balance_for_employee(db, employee_id)
            if balance < cost:
                raise InsufficientBalanceError(
                    f"Balance {balance} is below the {cost} points needed for '{reward_name}'"
                )
            if not ledger_store.claim_ledger_version(db, employee_id, expected_version):
                db.rollback()
                logger.warning(
                    "Redemption for %s lost a ledger race (attempt %d/%d); retrying",
                    employee_id, attempt, settings.REDEMPTION_MAX_ATTEMPTS,
                )
                continue
            event = ledger_store.insert_event(
                db,
                employee_id=employee_id,
                location_id=location_id,
                amount=-cost,
                source=PointSource.redemption,
                source_detail=reward_name,
                awarded_by=None,
                created_at=now or ledger_store.utcnow(),
            )
            db.commit()
        except LedgerError:
            db.rollback()
            raise
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Redemption of reward %s for %s failed", reward_id, employee_id)
            raise

        db.refresh(event)
        logger.info(
            "Redeemed '%s' (%d points) for %s, balance now %d (event %s)",
            reward_name, cost, employee_id, balance - cost, event.event_id,
        )
        return event

    raise ConflictError(
        f"Redemption for {employee_id} kept conflicting with concurrent ledger writes; try again"
    )
