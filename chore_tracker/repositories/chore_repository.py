"""
Chore repository - Data access layer for ChoreDefinition and ExtraTask models.
Definitions are soft-deleted, so there is no delete method here.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_

from chore_tracker.models import ChoreDefinition, ExtraTask


class ChoreRepository:
    """Repository for ChoreDefinition data access"""

    @staticmethod
    def get_by_id(db: Session, chore_id: int) -> Optional[ChoreDefinition]:
        """Get chore definition by ID"""
        return db.query(ChoreDefinition).filter(ChoreDefinition.id == chore_id).first()

    @staticmethod
    def get_all(db: Session) -> List[ChoreDefinition]:
        """Get all chore definitions (active and inactive)"""
        return db.query(ChoreDefinition).order_by(ChoreDefinition.id).all()

    @staticmethod
    def get_active_by_list(db: Session, list_name: str) -> List[ChoreDefinition]:
        """Get active chores for list A or B"""
        return db.query(ChoreDefinition).filter(
            and_(
                ChoreDefinition.list_name == list_name,
                ChoreDefinition.active == True
            )
        ).order_by(ChoreDefinition.id).all()

    @staticmethod
    def create(db: Session, chore: ChoreDefinition) -> ChoreDefinition:
        """Create a new chore definition"""
        db.add(chore)
        db.commit()
        db.refresh(chore)
        return chore

    @staticmethod
    def update(db: Session, chore: ChoreDefinition) -> ChoreDefinition:
        """Update existing chore definition"""
        db.commit()
        db.refresh(chore)
        return chore


class ExtraTaskRepository:
    """Repository for ExtraTask data access"""

    @staticmethod
    def get_by_id(db: Session, task_id: int) -> Optional[ExtraTask]:
        """Get extra task by ID"""
        return db.query(ExtraTask).filter(ExtraTask.id == task_id).first()

    @staticmethod
    def get_all(db: Session, kid_id: Optional[int] = None) -> List[ExtraTask]:
        """Get all extra tasks (active and inactive), optionally for one kid"""
        query = db.query(ExtraTask)
        if kid_id is not None:
            query = query.filter(ExtraTask.kid_id == kid_id)
        return query.order_by(ExtraTask.id).all()

    @staticmethod
    def get_active_for_kid(db: Session, kid_id: int) -> List[ExtraTask]:
        """Get active extra tasks owned by a kid"""
        return db.query(ExtraTask).filter(
            and_(
                ExtraTask.kid_id == kid_id,
                ExtraTask.active == True
            )
        ).order_by(ExtraTask.id).all()

    @staticmethod
    def create(db: Session, task: ExtraTask) -> ExtraTask:
        """Create a new extra task"""
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def update(db: Session, task: ExtraTask) -> ExtraTask:
        """Update existing extra task"""
        db.commit()
        db.refresh(task)
        return task
