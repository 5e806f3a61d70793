from sqlalchemy.orm import Session

from models.goal import Goal
from schemas.goal import GoalCreate, GoalUpdate


def create_goal(db: Session, goal: GoalCreate) -> Goal:
    db_goal = Goal(**goal.model_dump())
    db.add(db_goal)
    db.commit()
    db.refresh(db_goal)
    return db_goal


def get_goal(db: Session, goal_id: int) -> Goal | None:
    return db.query(Goal).filter(Goal.id == goal_id).first()


def get_goals(db: Session, skip: int = 0, limit: int = 100, completed: bool | None = None):
    query = db.query(Goal)
    if completed is not None:
        query = query.filter(Goal.completed == completed)
    return query.order_by(Goal.created_at.desc(), Goal.id.desc()).offset(skip).limit(limit).all()


def update_goal(db: Session, goal_id: int, goal: GoalUpdate) -> Goal | None:
    db_goal = get_goal(db, goal_id)
    if db_goal:
        for key, value in goal.model_dump(exclude_unset=True).items():
            setattr(db_goal, key, value)
        # a new target can complete or reopen the goal
        db_goal.completed = db_goal.current_amount >= db_goal.target_amount
        db.commit()
        db.refresh(db_goal)
    return db_goal


def delete_goal(db: Session, goal_id: int) -> Goal | None:
    db_goal = get_goal(db, goal_id)
    if db_goal:
        # donations outlive their goal as general donations
        for donation in db_goal.donations:
            donation.goal_id = None
        db.delete(db_goal)
        db.commit()
    return db_goal
