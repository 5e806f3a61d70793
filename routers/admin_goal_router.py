import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import crud.donations as donations
import crud.goals as crud
from core.auth import require_admin, require_permissions
from core.errors import NotFound
from db.database import get_db
from schemas.goal import DonationList, GoalCreate, GoalResponse, GoalUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _get_goal(goal_id: int, db: Session):
    db_goal = crud.get_goal(db=db, goal_id=goal_id)
    if db_goal is None:
        raise NotFound("Goal not found")
    return db_goal


@router.get("/goals", response_model=List[GoalResponse])
def read_goals(completed: Optional[bool] = None, db: Session = Depends(get_db)):
    return crud.get_goals(db=db, completed=completed)


@router.post("/goals", response_model=GoalResponse, status_code=201, dependencies=[Depends(require_permissions("write:goals"))])
def create_goal(goal: GoalCreate, db: Session = Depends(get_db)):
    return crud.create_goal(db=db, goal=goal)


@router.get("/goals/{goal_id}", response_model=GoalResponse)
def read_goal(goal_id: int, db: Session = Depends(get_db)):
    return _get_goal(goal_id, db)


@router.patch("/goals/{goal_id}", response_model=GoalResponse, dependencies=[Depends(require_permissions("write:goals"))])
def update_goal(goal_id: int, goal: GoalUpdate, db: Session = Depends(get_db)):
    db_goal = crud.update_goal(db=db, goal_id=goal_id, goal=goal)
    if db_goal is None:
        raise NotFound("Goal not found")
    return db_goal


@router.delete("/goals/{goal_id}", dependencies=[Depends(require_permissions("delete:goals"))])
def delete_goal(goal_id: int, db: Session = Depends(get_db)):
    if crud.delete_goal(db=db, goal_id=goal_id) is None:
        raise NotFound("Goal not found")
    logger.info("Goal %s deleted; its donations are now general donations", goal_id)
    return {"message": "Goal deleted successfully"}


@router.post("/goals/{goal_id}/recalculate", response_model=GoalResponse, dependencies=[Depends(require_permissions("write:goals"))])
def recalculate_goal(goal_id: int, db: Session = Depends(get_db)):
    db_goal = _get_goal(goal_id, db)
    before = db_goal.current_amount
    db_goal = donations.recalculate_goal(db=db, goal=db_goal)
    if db_goal.current_amount != before:
        logger.warning("Goal %s total drifted: %s -> %s", goal_id, before, db_goal.current_amount)
    return db_goal


@router.get("/donations", response_model=DonationList, dependencies=[Depends(require_permissions("read:donations"))])
def read_donations(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    total, total_amount = donations.donation_totals(db)
    return {
        "donations": donations.get_donations(db=db, skip=skip, limit=limit),
        "total": total,
        "total_amount": total_amount,
    }
