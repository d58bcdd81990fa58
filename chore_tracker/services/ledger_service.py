"""
Completion ledger service.

The ledger is the only durable truth for "was task X done by kid K on day D":
a row exists when it was, and no row exists when it was not. Toggling an
extra task brackets the write with a progress read before and after, and the
kid's point counter moves only when the "all extra tasks done" state flips.

Each mutation is one unit of work: a per-kid lock in this process plus a
row lock on the kid (SELECT ... FOR UPDATE where the backend supports it),
committed once at the end.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from chore_tracker.models import CompletionRecord
from chore_tracker.repositories.kid_repository import KidRepository
from chore_tracker.repositories.chore_repository import ChoreRepository, ExtraTaskRepository
from chore_tracker.repositories.completion_repository import CompletionRepository
from chore_tracker.services.kid_service import KidService
from chore_tracker.services.progress_service import ProgressService, DailyProgress
from chore_tracker.exceptions import (
    ChoreTrackerException,
    KidNotFoundException,
    ChoreNotFoundException,
    ExtraTaskNotFoundException,
    ValidationException,
)
from chore_tracker.constants import (
    TASK_TYPE_CHORE, TASK_TYPE_EXTRA, TASK_TYPES, POINTS_PER_EXTRA_TASK_DAY
)

logger = logging.getLogger("chore_tracker.ledger")


class KidLockRegistry:
    """One mutex per kid, created on first use"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def lock_for(self, kid_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(kid_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[kid_id] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


kid_locks = KidLockRegistry()


@dataclass
class LedgerChange:
    record: Optional[CompletionRecord]
    completed: bool
    points_delta: int


@dataclass
class ToggleResult:
    kid_id: int
    task_type: str
    task_id: int
    date: date
    completed: bool
    points_delta: int
    points: int
    progress: DailyProgress


def transition_delta(before: bool, after: bool) -> int:
    """Points to apply for a change of the "all extra tasks done" state"""
    if not before and after:
        return POINTS_PER_EXTRA_TASK_DAY
    if before and not after:
        return -POINTS_PER_EXTRA_TASK_DAY
    return 0


class LedgerService:
    """Service for task completions and the point transitions they cause"""

    def __init__(self, db: Session, locks: Optional[KidLockRegistry] = None):
        self.db = db
        self.locks = locks or kid_locks
        self.kid_repo = KidRepository()
        self.chore_repo = ChoreRepository()
        self.extra_repo = ExtraTaskRepository()
        self.completion_repo = CompletionRepository()
        self.kid_service = KidService(db)
        self.progress_service = ProgressService(db)

    # ===== READS =====

    def is_completed(self, kid_id: int, task_type: str, task_id: int, target_date: date) -> bool:
        return self.completion_repo.get(self.db, kid_id, task_type, task_id, target_date) is not None

    def list_completions(self, kid_id: int, target_date: date) -> List[CompletionRecord]:
        """All completion records of a kid for one day"""
        return self.completion_repo.get_for_day(self.db, kid_id, target_date)

    def get_task_history(
        self,
        kid_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[CompletionRecord]:
        """Completion history ordered by completion time, filtered by kid and inclusive date range"""
        return self.completion_repo.get_history(self.db, kid_id, start_date, end_date)

    # ===== MUTATIONS =====

    def mark_complete(self, kid_id: int, task_type: str, task_id: int, target_date: date) -> CompletionRecord:
        """
        Record that a task was done on a day.

        Idempotent: if the record already exists it is returned unchanged and
        no points move.

        Raises:
            KidNotFoundException, ChoreNotFoundException, ExtraTaskNotFoundException
        """
        change = self._apply(kid_id, task_type, task_id, target_date, complete=True)
        return change.record

    def unmark_complete(self, kid_id: int, task_type: str, task_id: int, target_date: date) -> None:
        """Remove the completion record of a task for a day; no-op if it is absent"""
        self._apply(kid_id, task_type, task_id, target_date, complete=False)

    def toggle(self, kid_id: int, task_type: str, task_id: int, target_date: date) -> ToggleResult:
        """Flip a task's completion for a day and report the resulting state"""
        change = self._apply(kid_id, task_type, task_id, target_date, complete=None)

        kid = self.kid_repo.get_by_id(self.db, kid_id)
        progress = self.progress_service.compute_daily_progress(kid_id, target_date)
        return ToggleResult(
            kid_id=kid_id,
            task_type=task_type,
            task_id=task_id,
            date=target_date,
            completed=change.completed,
            points_delta=change.points_delta,
            points=kid.points,
            progress=progress
        )

    def _apply(
        self,
        kid_id: int,
        task_type: str,
        task_id: int,
        target_date: date,
        complete: Optional[bool]
    ) -> LedgerChange:
        """
        Move a task into the requested state (complete=None flips it).

        Runs read-before, write, read-after and award as a single transaction
        while holding the kid's lock.
        """
        if task_type not in TASK_TYPES:
            raise ValidationException("task_type", f"must be one of {', '.join(TASK_TYPES)}")

        # Locks are only registered for kids that exist
        if not self.kid_repo.get_by_id(self.db, kid_id):
            raise KidNotFoundException(kid_id)

        with self.locks.lock_for(kid_id):
            try:
                kid = self.kid_repo.get_by_id(self.db, kid_id, for_update=True)
                if not kid:
                    raise KidNotFoundException(kid_id)
                self._ensure_task_exists(kid_id, task_type, task_id)

                existing = self.completion_repo.get(self.db, kid_id, task_type, task_id, target_date)
                if complete is None:
                    complete = existing is None

                if complete == (existing is not None):
                    # Already in the requested state
                    self.db.commit()
                    return LedgerChange(record=existing, completed=complete, points_delta=0)

                before = self._extra_tasks_completed(kid_id, task_type, target_date)

                if complete:
                    record = self.completion_repo.add(self.db, CompletionRecord(
                        kid_id=kid_id,
                        task_type=task_type,
                        task_id=task_id,
                        date=target_date,
                        completed_at=datetime.utcnow()
                    ))
                else:
                    self.completion_repo.delete(self.db, existing)
                    record = None

                after = self._extra_tasks_completed(kid_id, task_type, target_date)
                delta = transition_delta(before, after)
                if delta:
                    self.kid_service.award_points(kid_id, delta, commit=False)

                self.db.commit()
            except IntegrityError:
                # A concurrent writer inserted the same record and already awarded for it
                self.db.rollback()
                logger.warning(
                    f"Concurrent completion for kid {kid_id} {task_type} {task_id} on {target_date}"
                )
                record = self.completion_repo.get(self.db, kid_id, task_type, task_id, target_date)
                return LedgerChange(record=record, completed=record is not None, points_delta=0)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Ledger write failed for kid {kid_id}: {e}")
                raise
            except ChoreTrackerException:
                self.db.rollback()
                raise

        if record is not None:
            self.db.refresh(record)

        action = "Marked" if complete else "Unmarked"
        logger.info(
            f"{action} {task_type} {task_id} for kid {kid_id} on {target_date} (points {delta:+d})"
        )
        return LedgerChange(record=record, completed=complete, points_delta=delta)

    def _ensure_task_exists(self, kid_id: int, task_type: str, task_id: int) -> None:
        if task_type == TASK_TYPE_CHORE:
            if not self.chore_repo.get_by_id(self.db, task_id):
                raise ChoreNotFoundException(task_id)
        else:
            task = self.extra_repo.get_by_id(self.db, task_id)
            if not task or task.kid_id != kid_id:
                raise ExtraTaskNotFoundException(task_id, kid_id)

    def _extra_tasks_completed(self, kid_id: int, task_type: str, target_date: date) -> bool:
        # Only extra tasks drive points; chore toggles never bracket
        if task_type != TASK_TYPE_EXTRA:
            return False
        return self.progress_service.compute_daily_progress(kid_id, target_date).extra_tasks_completed
