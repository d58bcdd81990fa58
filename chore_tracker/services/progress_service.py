"""
Progress calculation service.

Derives a kid's daily completion state from the completion ledger and the
currently active task sets. Nothing here is stored: a "completed day" is
recomputed on every read.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from chore_tracker.models import CompletionRecord
from chore_tracker.repositories.kid_repository import KidRepository
from chore_tracker.repositories.chore_repository import ChoreRepository, ExtraTaskRepository
from chore_tracker.repositories.completion_repository import CompletionRepository
from chore_tracker.services.date_service import DateService
from chore_tracker.exceptions import KidNotFoundException
from chore_tracker.constants import (
    TASK_TYPE_CHORE, TASK_TYPE_EXTRA, POINTS_PER_EXTRA_TASK_DAY
)


@dataclass
class DailyProgress:
    kid_id: int
    date: date
    chores_completed: bool
    extra_tasks_completed: bool
    points_earned_today: int


@dataclass
class WeeklyProgress:
    kid_id: int
    start_date: date
    end_date: date
    days: List[DailyProgress]

    @property
    def chore_days_completed(self) -> int:
        return sum(1 for day in self.days if day.chores_completed)

    @property
    def extra_task_days_completed(self) -> int:
        return sum(1 for day in self.days if day.extra_tasks_completed)


def all_done(active_ids: Iterable[int], done_ids: Iterable[int]) -> bool:
    """
    True when every active id is done.
    An empty active set is never "all done".
    """
    active = set(active_ids)
    if not active:
        return False
    return active.issubset(set(done_ids))


def evaluate_progress(
    active_chore_ids: Iterable[int],
    active_extra_ids: Iterable[int],
    completions: Iterable[CompletionRecord]
) -> tuple:
    """
    Pure progress evaluation over one day's completions.

    Returns:
        (chores_completed, extra_tasks_completed, points_earned_today)
    """
    chore_done = set()
    extra_done = set()
    for record in completions:
        if record.task_type == TASK_TYPE_CHORE:
            chore_done.add(record.task_id)
        elif record.task_type == TASK_TYPE_EXTRA:
            extra_done.add(record.task_id)

    chores_completed = all_done(active_chore_ids, chore_done)
    extra_tasks_completed = all_done(active_extra_ids, extra_done)
    points_earned = POINTS_PER_EXTRA_TASK_DAY if extra_tasks_completed else 0

    return chores_completed, extra_tasks_completed, points_earned


class ProgressService:
    """Service for daily and weekly progress"""

    def __init__(self, db: Session):
        self.db = db
        self.kid_repo = KidRepository()
        self.chore_repo = ChoreRepository()
        self.extra_repo = ExtraTaskRepository()
        self.completion_repo = CompletionRepository()
        self.date_service = DateService()

    def compute_daily_progress(self, kid_id: int, target_date: date) -> DailyProgress:
        """
        Compute whether a kid finished their chore list and extra tasks on a day.

        Chores come from the kid's current list (A or B) at computation time,
        extra tasks from the kid's own active set.

        Raises:
            KidNotFoundException: if the kid does not exist
        """
        kid = self.kid_repo.get_by_id(self.db, kid_id)
        if not kid:
            raise KidNotFoundException(kid_id)

        active_chores = self.chore_repo.get_active_by_list(self.db, kid.current_list)
        active_extras = self.extra_repo.get_active_for_kid(self.db, kid_id)
        completions = self.completion_repo.get_for_day(self.db, kid_id, target_date)

        chores_completed, extra_completed, points_earned = evaluate_progress(
            [chore.id for chore in active_chores],
            [task.id for task in active_extras],
            completions
        )

        return DailyProgress(
            kid_id=kid_id,
            date=target_date,
            chores_completed=chores_completed,
            extra_tasks_completed=extra_completed,
            points_earned_today=points_earned
        )

    def compute_weekly_progress(self, kid_id: int, start_date: Optional[date] = None) -> WeeklyProgress:
        """Daily progress for seven consecutive days (default: the current week from Monday)"""
        if start_date is None:
            start_date = self.date_service.week_start(self.date_service.today())
        start, end = self.date_service.week_range(start_date)

        kid = self.kid_repo.get_by_id(self.db, kid_id)
        if not kid:
            raise KidNotFoundException(kid_id)

        chore_ids = [c.id for c in self.chore_repo.get_active_by_list(self.db, kid.current_list)]
        extra_ids = [t.id for t in self.extra_repo.get_active_for_kid(self.db, kid_id)]

        by_day = {}
        for record in self.completion_repo.get_in_range(self.db, start, end, kid_id=kid_id):
            by_day.setdefault(record.date, []).append(record)

        days = []
        for day in self.date_service.days_in_range(start, end):
            chores_completed, extra_completed, points_earned = evaluate_progress(
                chore_ids, extra_ids, by_day.get(day, [])
            )
            days.append(DailyProgress(
                kid_id=kid_id,
                date=day,
                chores_completed=chores_completed,
                extra_tasks_completed=extra_completed,
                points_earned_today=points_earned
            ))

        return WeeklyProgress(kid_id=kid_id, start_date=start, end_date=end, days=days)
