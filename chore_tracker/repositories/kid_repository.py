"""
Kid repository - Data access layer for Kid model.
Handles all database queries related to kids and their point counters.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from chore_tracker.models import Kid


class KidRepository:
    """Repository for Kid data access"""

    @staticmethod
    def get_by_id(db: Session, kid_id: int, for_update: bool = False) -> Optional[Kid]:
        """Get kid by ID, optionally locking the row until the transaction ends"""
        query = db.query(Kid).filter(Kid.id == kid_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_all(db: Session, include_inactive: bool = False) -> List[Kid]:
        """Get kids ordered by ID"""
        query = db.query(Kid)
        if not include_inactive:
            query = query.filter(Kid.active == True)
        return query.order_by(Kid.id).all()

    @staticmethod
    def create(db: Session, kid: Kid) -> Kid:
        """Create a new kid"""
        db.add(kid)
        db.commit()
        db.refresh(kid)
        return kid

    @staticmethod
    def update(db: Session, kid: Kid) -> Kid:
        """Update existing kid"""
        db.commit()
        db.refresh(kid)
        return kid

    @staticmethod
    def add_points(db: Session, kid: Kid, delta: int) -> Kid:
        """
        Apply a point delta without committing.
        The caller owns the transaction boundary.
        """
        kid.points = (kid.points or 0) + delta
        db.flush()
        return kid
