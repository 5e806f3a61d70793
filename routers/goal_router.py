from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud.goals as crud
from core.errors import NotFound
from core.rate_limit import rate_limited
from db.database import get_db
from schemas.goal import GoalResponse

router = APIRouter(prefix="/goals", tags=["goals"], dependencies=[Depends(rate_limited("goals"))])


@router.get("", response_model=List[GoalResponse])
def read_active_goals(db: Session = Depends(get_db)):
    """Goals still collecting donations, newest first."""
    return crud.get_goals(db=db, completed=False)


@router.get("/{goal_id}", response_model=GoalResponse)
def read_goal(goal_id: int, db: Session = Depends(get_db)):
    db_goal = crud.get_goal(db=db, goal_id=goal_id)
    if db_goal is None:
        raise NotFound("Goal not found")
    return db_goal
