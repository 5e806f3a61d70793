"""Donation persistence and the goal ledger update.

Donations are the source of truth; ``Goal.current_amount`` and
``Goal.completed`` are a denormalized cache of them. The goal update is one
UPDATE statement evaluated by the database, so concurrent donations to the
same goal cannot lose an increment.
"""
import logging
from decimal import Decimal

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.goal import Donation, Goal
from schemas.goal import DonationCreate

logger = logging.getLogger(__name__)


def create_donation(db: Session, donation: DonationCreate) -> Donation:
    data = donation.model_dump()
    if data["anonymous"]:
        data["donor_name"] = None

    goal_id = data.get("goal_id")
    if goal_id is not None and db.get(Goal, goal_id) is None:
        logger.warning("Donation references missing goal %s; recording as general", goal_id)
        data["goal_id"] = None

    db_donation = Donation(**data)
    db.add(db_donation)
    db.commit()
    db.refresh(db_donation)

    if db_donation.goal_id is not None:
        apply_donation_to_goal(db, db_donation.goal_id, db_donation.amount)
    return db_donation


def apply_donation_to_goal(db: Session, goal_id: int, amount: Decimal) -> bool:
    """Atomically add ``amount`` to a goal and recompute completion.

    Returns False when the goal no longer exists or the update failed; the
    donation itself is never rolled back for that.
    """
    new_total = Goal.current_amount + amount
    stmt = (
        update(Goal)
        .where(Goal.id == goal_id)
        .values(current_amount=new_total, completed=new_total >= Goal.target_amount)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ledger update failed for goal %s", goal_id)
        return False

    if result.rowcount == 0:
        logger.warning("Goal %s vanished before ledger update; skipped", goal_id)
        return False
    return True


def recalculate_goal(db: Session, goal: Goal) -> Goal:
    """Rebuild a goal's running total from its donations."""
    total = (
        db.query(func.coalesce(func.sum(Donation.amount), 0))
        .filter(Donation.goal_id == goal.id)
        .scalar()
    )
    goal.current_amount = Decimal(str(total))
    goal.completed = goal.current_amount >= goal.target_amount
    db.commit()
    db.refresh(goal)
    return goal


def get_donations(db: Session, skip: int = 0, limit: int = 100):
    return (
        db.query(Donation)
        .order_by(Donation.created_at.desc(), Donation.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def donation_totals(db: Session) -> tuple[int, Decimal]:
    count, total = db.query(func.count(Donation.id), func.coalesce(func.sum(Donation.amount), 0)).one()
    return count, Decimal(str(total))
