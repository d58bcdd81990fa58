"""
Admin HTTP routes: kids, chore lists, extra tasks, points, rotation and settings.
Everything except PIN verification requires the X-Admin-Pin header.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from chore_tracker.auth import verify_admin_pin
from chore_tracker.database import get_db
from chore_tracker.schemas import (
    KidCreate, KidUpdate, KidResponse,
    ChoreCreate, ChoreUpdate, ChoreResponse,
    ExtraTaskCreate, ExtraTaskUpdate, ExtraTaskResponse,
    AwardPointsRequest, SwitchListsResponse, CompletionResponse,
    PinVerifyRequest, PinVerifyResponse,
    SettingUpdate, SettingResponse
)
from chore_tracker.services.kid_service import KidService
from chore_tracker.services.chore_service import ChoreService
from chore_tracker.services.ledger_service import LedgerService
from chore_tracker.services.settings_service import SettingsService
from chore_tracker.exceptions import KidNotFoundException

router = APIRouter(prefix="/api/admin", tags=["admin"])

protected = [Depends(verify_admin_pin)]


@router.post("/verify-pin", response_model=PinVerifyResponse)
def verify_pin(request: PinVerifyRequest, db: Session = Depends(get_db)):
    """Check an admin PIN (used by the UI to unlock admin mode)"""
    return {"valid": SettingsService(db).verify_admin_pin(request.pin)}


# ===== KIDS =====

@router.get("/kids", response_model=List[KidResponse], dependencies=protected)
def get_all_kids(db: Session = Depends(get_db)):
    """Get all kids including deactivated ones"""
    return KidService(db).get_all_kids(include_inactive=True)


@router.post("/kids", response_model=KidResponse, status_code=status.HTTP_201_CREATED, dependencies=protected)
def create_kid(kid: KidCreate, db: Session = Depends(get_db)):
    """Create a new kid"""
    return KidService(db).create_kid(kid)


@router.patch("/kids/{kid_id}", response_model=KidResponse, dependencies=protected)
def update_kid(kid_id: int, kid_update: KidUpdate, db: Session = Depends(get_db)):
    """Update a kid"""
    kid = KidService(db).update_kid(kid_id, kid_update)
    if not kid:
        raise HTTPException(status_code=404, detail="Kid not found")
    return kid


@router.delete("/kids/{kid_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=protected)
def delete_kid(kid_id: int, db: Session = Depends(get_db)):
    """Deactivate a kid"""
    if not KidService(db).deactivate_kid(kid_id):
        raise HTTPException(status_code=404, detail="Kid not found")


# ===== CHORE LISTS =====

@router.get("/chores", response_model=List[ChoreResponse], dependencies=protected)
def get_all_chores(db: Session = Depends(get_db)):
    """Get all chores (active and inactive)"""
    return ChoreService(db).get_all_chores()


@router.post("/chores", response_model=ChoreResponse, status_code=status.HTTP_201_CREATED, dependencies=protected)
def create_chore(chore: ChoreCreate, db: Session = Depends(get_db)):
    """Add a chore to list A or B"""
    return ChoreService(db).create_chore(chore)


@router.patch("/chores/{chore_id}", response_model=ChoreResponse, dependencies=protected)
def update_chore(chore_id: int, chore_update: ChoreUpdate, db: Session = Depends(get_db)):
    """Update a chore"""
    chore = ChoreService(db).update_chore(chore_id, chore_update)
    if not chore:
        raise HTTPException(status_code=404, detail="Chore not found")
    return chore


@router.delete("/chores/{chore_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=protected)
def delete_chore(chore_id: int, db: Session = Depends(get_db)):
    """Deactivate a chore"""
    if not ChoreService(db).deactivate_chore(chore_id):
        raise HTTPException(status_code=404, detail="Chore not found")


# ===== EXTRA TASKS =====

@router.get("/extra-tasks", response_model=List[ExtraTaskResponse], dependencies=protected)
def get_all_extra_tasks(kid_id: Optional[int] = None, db: Session = Depends(get_db)):
    """Get all extra tasks (active and inactive)"""
    return ChoreService(db).get_all_extra_tasks(kid_id)


@router.post("/extra-tasks", response_model=ExtraTaskResponse, status_code=status.HTTP_201_CREATED, dependencies=protected)
def create_extra_task(task: ExtraTaskCreate, db: Session = Depends(get_db)):
    """Add an extra task for a kid"""
    try:
        return ChoreService(db).create_extra_task(task)
    except KidNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/extra-tasks/{task_id}", response_model=ExtraTaskResponse, dependencies=protected)
def update_extra_task(task_id: int, task_update: ExtraTaskUpdate, db: Session = Depends(get_db)):
    """Update an extra task"""
    task = ChoreService(db).update_extra_task(task_id, task_update)
    if not task:
        raise HTTPException(status_code=404, detail="Extra task not found")
    return task


@router.delete("/extra-tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=protected)
def delete_extra_task(task_id: int, db: Session = Depends(get_db)):
    """Deactivate an extra task"""
    if not ChoreService(db).deactivate_extra_task(task_id):
        raise HTTPException(status_code=404, detail="Extra task not found")


# ===== POINTS & ROTATION =====

@router.post("/switch-lists", response_model=SwitchListsResponse, dependencies=protected)
def switch_lists(db: Session = Depends(get_db)):
    """Flip every kid between chore list A and B"""
    kids = KidService(db).switch_lists()
    return {"message": "Chore lists switched", "kids": kids}


@router.post("/award-points", response_model=KidResponse, dependencies=protected)
def award_points(request: AwardPointsRequest, db: Session = Depends(get_db)):
    """Manually adjust a kid's points (negative values remove points)"""
    kid = KidService(db).award_points(request.kid_id, request.points)
    if not kid:
        raise HTTPException(status_code=404, detail="Kid not found")
    return kid


@router.get("/history", response_model=List[CompletionResponse], dependencies=protected)
def get_history(
    kid_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Completion history across kids"""
    return LedgerService(db).get_task_history(kid_id, start_date, end_date)


# ===== SETTINGS =====

@router.get("/settings", response_model=List[SettingResponse], dependencies=protected)
def get_settings(db: Session = Depends(get_db)):
    """Get all settings"""
    return SettingsService(db).get_all_settings()


@router.get("/settings/{key}", response_model=SettingResponse, dependencies=protected)
def get_setting(key: str, db: Session = Depends(get_db)):
    """Get one setting"""
    setting = SettingsService(db).get_setting_row(key)
    if not setting:
        raise HTTPException(status_code=404, detail="Setting not found")
    return setting


@router.put("/settings/{key}", response_model=SettingResponse, dependencies=protected)
def put_setting(key: str, setting: SettingUpdate, db: Session = Depends(get_db)):
    """Create or update a setting"""
    return SettingsService(db).set_setting(key, setting.value)
