"""
Settings service - key/value application configuration (admin PIN, scheduler toggles).
"""
import hmac
from datetime import datetime
import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from chore_tracker.models import Setting
from chore_tracker.repositories.settings_repository import SettingsRepository
from chore_tracker.constants import DEFAULT_SETTINGS, SETTING_ADMIN_PIN

logger = logging.getLogger("chore_tracker.settings")


class SettingsService:
    """Service for key/value settings"""

    def __init__(self, db: Session):
        self.db = db
        self.settings_repo = SettingsRepository()

    def get_setting(self, key: str) -> Optional[str]:
        """Get a setting value by key, or None if it is not set"""
        setting = self.settings_repo.get(self.db, key)
        return setting.value if setting else None

    def get_setting_row(self, key: str) -> Optional[Setting]:
        return self.settings_repo.get(self.db, key)

    def get_all_settings(self) -> List[Setting]:
        return self.settings_repo.get_all(self.db)

    def set_setting(self, key: str, value: str, commit: bool = True) -> Setting:
        """
        Insert or update a setting value and refresh its updated_at.

        With commit=False the write is flushed into the caller's transaction.
        """
        setting = self.settings_repo.get(self.db, key)
        if setting:
            setting.value = value
            # onupdate only fires when another column changed
            setting.updated_at = datetime.utcnow()
        else:
            setting = Setting(key=key, value=value)
            self.db.add(setting)

        if not commit:
            self.db.flush()
            return setting
        return self.settings_repo.update(self.db, setting)

    def initialize_default_settings(self) -> Dict[str, str]:
        """
        Seed default settings that do not exist yet.

        Returns:
            The settings that were created
        """
        created = {}
        for key, value in DEFAULT_SETTINGS.items():
            if self.settings_repo.get(self.db, key) is None:
                self.settings_repo.create(self.db, Setting(key=key, value=value))
                created[key] = value

        if created:
            logger.info(f"Initialized default settings: {sorted(created)}")
        return created

    def verify_admin_pin(self, pin: Optional[str]) -> bool:
        """Check a PIN against the stored admin PIN"""
        stored = self.get_setting(SETTING_ADMIN_PIN)
        if not pin or stored is None:
            return False
        return hmac.compare_digest(pin.encode(), stored.encode())
