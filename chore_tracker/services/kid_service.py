"""
Kid management service.
Handles kid CRUD, the point counter and the weekly A/B list rotation.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from chore_tracker.models import Kid
from chore_tracker.schemas import KidCreate, KidUpdate
from chore_tracker.repositories.kid_repository import KidRepository
from chore_tracker.constants import other_list

logger = logging.getLogger("chore_tracker.kids")


class KidService:
    """Service for kid management"""

    def __init__(self, db: Session):
        self.db = db
        self.kid_repo = KidRepository()

    def get_all_kids(self, include_inactive: bool = False) -> List[Kid]:
        """Get kids ordered by ID (active only unless include_inactive)"""
        return self.kid_repo.get_all(self.db, include_inactive)

    def get_kid(self, kid_id: int) -> Optional[Kid]:
        """Get kid by ID"""
        return self.kid_repo.get_by_id(self.db, kid_id)

    def create_kid(self, kid_data: KidCreate) -> Kid:
        """Create a new kid with zero points"""
        kid = Kid(**kid_data.model_dump(), points=0, active=True)
        kid = self.kid_repo.create(self.db, kid)
        logger.info(f"Created kid {kid.id} ({kid.name})")
        return kid

    def update_kid(self, kid_id: int, kid_update: KidUpdate) -> Optional[Kid]:
        """
        Apply a partial update.

        Points are not patchable here; use award_points.

        Returns:
            Updated kid, or None if the kid does not exist
        """
        kid = self.kid_repo.get_by_id(self.db, kid_id)
        if not kid:
            return None

        for field, value in kid_update.model_dump(exclude_unset=True).items():
            setattr(kid, field, value)

        return self.kid_repo.update(self.db, kid)

    def deactivate_kid(self, kid_id: int) -> bool:
        """Soft-delete a kid; ledger history is kept"""
        kid = self.kid_repo.get_by_id(self.db, kid_id)
        if not kid:
            return False

        kid.active = False
        self.kid_repo.update(self.db, kid)
        logger.info(f"Deactivated kid {kid_id}")
        return True

    def award_points(self, kid_id: int, delta: int, commit: bool = True) -> Optional[Kid]:
        """
        Add delta (may be negative) to a kid's point counter.

        This is the only sanctioned point mutator. No floor is enforced, so the
        counter may go below zero. With commit=False the change is flushed into
        the caller's transaction instead of committed.

        Returns:
            Updated kid, or None if the kid does not exist
        """
        try:
            kid = self.kid_repo.get_by_id(self.db, kid_id, for_update=True)
            if not kid:
                return None

            self.kid_repo.add_points(self.db, kid, delta)
            if commit:
                self.db.commit()
                self.db.refresh(kid)
        except SQLAlchemyError:
            if commit:
                self.db.rollback()
            raise

        logger.info(f"Awarded {delta:+d} point(s) to kid {kid_id}, total {kid.points}")
        return kid

    def switch_lists(self, commit: bool = True) -> List[Kid]:
        """
        Flip every kid's current list between A and B.

        Touches only Kid.current_list; the completion ledger is left as is.
        With commit=False the rotation is flushed into the caller's
        transaction, so it can be committed together with the switch date.

        Returns:
            All kids after the rotation
        """
        try:
            kids = self.kid_repo.get_all(self.db, include_inactive=True)
            for kid in kids:
                kid.current_list = other_list(kid.current_list)
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except SQLAlchemyError:
            if commit:
                self.db.rollback()
            raise

        if commit:
            for kid in kids:
                self.db.refresh(kid)
        logger.info(f"Switched chore lists for {len(kids)} kid(s)")
        return kids
