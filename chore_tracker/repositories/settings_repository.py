"""
Settings repository - Data access layer for Setting model.
Handles all database queries related to key/value settings.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from chore_tracker.models import Setting


class SettingsRepository:
    """Repository for Setting data access"""

    @staticmethod
    def get(db: Session, key: str) -> Optional[Setting]:
        """Get setting row by key"""
        return db.query(Setting).filter(Setting.key == key).first()

    @staticmethod
    def get_all(db: Session) -> List[Setting]:
        """Get all settings ordered by key"""
        return db.query(Setting).order_by(Setting.key).all()

    @staticmethod
    def create(db: Session, setting: Setting) -> Setting:
        """Create a new setting"""
        db.add(setting)
        db.commit()
        db.refresh(setting)
        return setting

    @staticmethod
    def update(db: Session, setting: Setting) -> Setting:
        """
        Commit a new or updated setting.

        Args:
            db: Database session
            setting: New or modified setting already in the session

        Returns:
            Updated setting
        """
        db.commit()
        db.refresh(setting)
        return setting
