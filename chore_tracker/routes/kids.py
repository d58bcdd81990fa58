"""
Kid-facing HTTP routes: task lists, progress and completion toggles.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from chore_tracker.database import get_db
from chore_tracker.schemas import (
    KidResponse, ChoreStatusResponse, ExtraTaskStatusResponse, CompletionResponse,
    DailyProgressResponse, WeeklyProgressResponse, ToggleResponse, TaskType
)
from chore_tracker.services.kid_service import KidService
from chore_tracker.services.chore_service import ChoreService
from chore_tracker.services.ledger_service import LedgerService
from chore_tracker.services.progress_service import ProgressService
from chore_tracker.services.date_service import DateService
from chore_tracker.exceptions import NOT_FOUND_EXCEPTIONS, ValidationException
from chore_tracker.constants import TASK_TYPE_CHORE, TASK_TYPE_EXTRA

router = APIRouter(prefix="/api/kids", tags=["kids"])


def _get_kid_or_404(db: Session, kid_id: int):
    kid = KidService(db).get_kid(kid_id)
    if not kid:
        raise HTTPException(status_code=404, detail="Kid not found")
    return kid


@router.get("", response_model=List[KidResponse])
def get_kids(include_inactive: bool = False, db: Session = Depends(get_db)):
    """Get all kids"""
    return KidService(db).get_all_kids(include_inactive)


@router.get("/{kid_id}", response_model=KidResponse)
def get_kid(kid_id: int, db: Session = Depends(get_db)):
    """Get a specific kid"""
    return _get_kid_or_404(db, kid_id)


@router.get("/{kid_id}/chores", response_model=List[ChoreStatusResponse])
def get_kid_chores(
    kid_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """Active chores of the kid's current list, with completion state for the day"""
    _get_kid_or_404(db, kid_id)
    day = DateService.resolve(target_date)
    chores = ChoreService(db).get_kid_active_chores(kid_id)
    done = {
        c.task_id for c in LedgerService(db).list_completions(kid_id, day)
        if c.task_type == TASK_TYPE_CHORE
    }
    return [
        ChoreStatusResponse(
            id=chore.id,
            list_name=chore.list_name,
            chore_name=chore.chore_name,
            active=chore.active,
            completed=chore.id in done
        )
        for chore in chores
    ]


@router.get("/{kid_id}/extra-tasks", response_model=List[ExtraTaskStatusResponse])
def get_kid_extra_tasks(
    kid_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """Active extra tasks of the kid, with completion state for the day"""
    _get_kid_or_404(db, kid_id)
    day = DateService.resolve(target_date)
    tasks = ChoreService(db).get_kid_active_extra_tasks(kid_id)
    done = {
        c.task_id for c in LedgerService(db).list_completions(kid_id, day)
        if c.task_type == TASK_TYPE_EXTRA
    }
    return [
        ExtraTaskStatusResponse(
            id=task.id,
            kid_id=task.kid_id,
            task_name=task.task_name,
            active=task.active,
            completed=task.id in done
        )
        for task in tasks
    ]


@router.get("/{kid_id}/progress", response_model=DailyProgressResponse)
def get_kid_progress(
    kid_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """Daily progress derived from the completion ledger"""
    _get_kid_or_404(db, kid_id)
    return ProgressService(db).compute_daily_progress(kid_id, DateService.resolve(target_date))


@router.get("/{kid_id}/progress/week", response_model=WeeklyProgressResponse)
def get_kid_weekly_progress(
    kid_id: int,
    start: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Seven days of progress starting at start (default: Monday of this week)"""
    _get_kid_or_404(db, kid_id)
    week = ProgressService(db).compute_weekly_progress(kid_id, start)
    return WeeklyProgressResponse(
        kid_id=week.kid_id,
        start_date=week.start_date,
        end_date=week.end_date,
        days=[DailyProgressResponse.model_validate(day) for day in week.days],
        chore_days_completed=week.chore_days_completed,
        extra_task_days_completed=week.extra_task_days_completed
    )


@router.get("/{kid_id}/completions", response_model=List[CompletionResponse])
def get_kid_completions(
    kid_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """Raw completion records for one day"""
    _get_kid_or_404(db, kid_id)
    return LedgerService(db).list_completions(kid_id, DateService.resolve(target_date))


@router.get("/{kid_id}/history", response_model=List[CompletionResponse])
def get_kid_history(
    kid_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Completion history of a kid, optionally limited to a date range"""
    _get_kid_or_404(db, kid_id)
    return LedgerService(db).get_task_history(kid_id, start_date, end_date)


@router.post("/{kid_id}/tasks/{task_type}/{task_id}/toggle", response_model=ToggleResponse)
def toggle_task(
    kid_id: int,
    task_type: TaskType,
    task_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    """Toggle a chore or extra task for a day; points move only when the day's state flips"""
    day = DateService.resolve(target_date)
    try:
        result = LedgerService(db).toggle(kid_id, task_type.value, task_id, day)
    except NOT_FOUND_EXCEPTIONS as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ToggleResponse(
        kid_id=result.kid_id,
        task_type=result.task_type,
        task_id=result.task_id,
        date=result.date,
        completed=result.completed,
        points_delta=result.points_delta,
        points=result.points,
        progress=DailyProgressResponse.model_validate(result.progress)
    )
