from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from chore_tracker.constants import ADMIN_PIN_HEADER
from chore_tracker.database import get_db
from chore_tracker.services.settings_service import SettingsService

# The admin PIN lives in the settings table (key "admin_pin")
admin_pin_header = APIKeyHeader(name=ADMIN_PIN_HEADER, auto_error=False)


async def verify_admin_pin(
    pin: str = Security(admin_pin_header),
    db: Session = Depends(get_db)
):
    """Verify the admin PIN header for admin endpoints"""
    if not SettingsService(db).verify_admin_pin(pin):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin PIN"
        )
    return pin
