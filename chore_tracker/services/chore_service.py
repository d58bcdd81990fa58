"""
Chore definition and extra task service.
Definitions are created by an administrator and soft-deleted (active=False),
so completion records pointing at them keep their meaning.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from chore_tracker.models import ChoreDefinition, ExtraTask
from chore_tracker.schemas import ChoreCreate, ChoreUpdate, ExtraTaskCreate, ExtraTaskUpdate
from chore_tracker.repositories.kid_repository import KidRepository
from chore_tracker.repositories.chore_repository import ChoreRepository, ExtraTaskRepository
from chore_tracker.exceptions import KidNotFoundException, ValidationException
from chore_tracker.constants import LIST_NAMES

logger = logging.getLogger("chore_tracker.chores")


class ChoreService:
    """Service for chore lists and per-kid extra tasks"""

    def __init__(self, db: Session):
        self.db = db
        self.kid_repo = KidRepository()
        self.chore_repo = ChoreRepository()
        self.extra_repo = ExtraTaskRepository()

    # ===== CHORE DEFINITIONS =====

    def get_all_chores(self) -> List[ChoreDefinition]:
        """Get all chores (active and inactive)"""
        return self.chore_repo.get_all(self.db)

    def get_chore(self, chore_id: int) -> Optional[ChoreDefinition]:
        return self.chore_repo.get_by_id(self.db, chore_id)

    def get_active_chore_list(self, list_name: str) -> List[ChoreDefinition]:
        """Get active chores for list A or B"""
        if list_name not in LIST_NAMES:
            raise ValidationException("list_name", f"must be one of {', '.join(LIST_NAMES)}")
        return self.chore_repo.get_active_by_list(self.db, list_name)

    def get_kid_active_chores(self, kid_id: int) -> List[ChoreDefinition]:
        """Get active chores of the list the kid is currently on"""
        kid = self.kid_repo.get_by_id(self.db, kid_id)
        if not kid:
            raise KidNotFoundException(kid_id)
        return self.chore_repo.get_active_by_list(self.db, kid.current_list)

    def create_chore(self, chore_data: ChoreCreate) -> ChoreDefinition:
        chore = ChoreDefinition(**chore_data.model_dump(), active=True)
        chore = self.chore_repo.create(self.db, chore)
        logger.info(f"Created chore {chore.id} on list {chore.list_name}")
        return chore

    def update_chore(self, chore_id: int, chore_update: ChoreUpdate) -> Optional[ChoreDefinition]:
        """Apply a partial update, or return None if the chore does not exist"""
        chore = self.chore_repo.get_by_id(self.db, chore_id)
        if not chore:
            return None

        for field, value in chore_update.model_dump(exclude_unset=True).items():
            setattr(chore, field, value)

        return self.chore_repo.update(self.db, chore)

    def deactivate_chore(self, chore_id: int) -> bool:
        """Deactivate instead of delete"""
        chore = self.chore_repo.get_by_id(self.db, chore_id)
        if not chore:
            return False

        chore.active = False
        self.chore_repo.update(self.db, chore)
        logger.info(f"Deactivated chore {chore_id}")
        return True

    # ===== EXTRA TASKS =====

    def get_all_extra_tasks(self, kid_id: Optional[int] = None) -> List[ExtraTask]:
        """Get all extra tasks (active and inactive), optionally for one kid"""
        return self.extra_repo.get_all(self.db, kid_id)

    def get_kid_active_extra_tasks(self, kid_id: int) -> List[ExtraTask]:
        """Get active extra tasks for a specific kid"""
        if not self.kid_repo.get_by_id(self.db, kid_id):
            raise KidNotFoundException(kid_id)
        return self.extra_repo.get_active_for_kid(self.db, kid_id)

    def create_extra_task(self, task_data: ExtraTaskCreate) -> ExtraTask:
        """
        Create an extra task owned by a kid.

        Raises:
            KidNotFoundException: if the owner does not exist
        """
        if not self.kid_repo.get_by_id(self.db, task_data.kid_id):
            raise KidNotFoundException(task_data.kid_id)

        task = ExtraTask(**task_data.model_dump(), active=True)
        task = self.extra_repo.create(self.db, task)
        logger.info(f"Created extra task {task.id} for kid {task.kid_id}")
        return task

    def update_extra_task(self, task_id: int, task_update: ExtraTaskUpdate) -> Optional[ExtraTask]:
        """Apply a partial update, or return None if the task does not exist"""
        task = self.extra_repo.get_by_id(self.db, task_id)
        if not task:
            return None

        for field, value in task_update.model_dump(exclude_unset=True).items():
            setattr(task, field, value)

        return self.extra_repo.update(self.db, task)

    def deactivate_extra_task(self, task_id: int) -> bool:
        """Deactivate instead of delete"""
        task = self.extra_repo.get_by_id(self.db, task_id)
        if not task:
            return False

        task.active = False
        self.extra_repo.update(self.db, task)
        logger.info(f"Deactivated extra task {task_id}")
        return True
