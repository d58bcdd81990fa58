"""
Background scheduler for the weekly list rotation.

The core never rotates lists on its own; this job is an optional trigger
started by the application process. It wakes every minute and switches
lists once on the configured weekday, after the configured time, when the
auto_switch_enabled setting is on.
"""
import logging
from datetime import datetime, timezone
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import sessionmaker

from chore_tracker.services.date_service import DateService
from chore_tracker.services.kid_service import KidService
from chore_tracker.services.settings_service import SettingsService
from chore_tracker.exceptions import ValidationException
from chore_tracker.constants import (
    SETTING_AUTO_SWITCH_ENABLED,
    SETTING_AUTO_SWITCH_DAY,
    SETTING_AUTO_SWITCH_TIME,
    SETTING_LAST_LIST_SWITCH_DATE,
    DEFAULT_AUTO_SWITCH_DAY,
    DEFAULT_AUTO_SWITCH_TIME,
    WEEKDAY_NAMES,
)

logger = logging.getLogger("chore_tracker.scheduler")

scheduler = AsyncIOScheduler()


def _normalize_time(time_str: Optional[str]) -> str:
    """
    Normalize a time to HHMM.
    Examples: '06:00' -> '0600', '600' -> '0600', None -> '0000'
    """
    if not time_str:
        return "0000"
    return time_str.replace(":", "").zfill(4)


def run_weekly_switch(session_factory: sessionmaker, now: Optional[datetime] = None) -> bool:
    """
    Rotate chore lists if the weekly switch is due.

    Returns:
        True if the lists were switched
    """
    now = now or datetime.now(timezone.utc)
    db = session_factory()
    try:
        settings = SettingsService(db)
        if (settings.get_setting(SETTING_AUTO_SWITCH_ENABLED) or "false").lower() != "true":
            return False

        switch_day = (settings.get_setting(SETTING_AUTO_SWITCH_DAY) or DEFAULT_AUTO_SWITCH_DAY).lower()
        if WEEKDAY_NAMES[now.weekday()] != switch_day[:3]:
            return False

        current_time = now.strftime("%H%M")
        target_time = _normalize_time(settings.get_setting(SETTING_AUTO_SWITCH_TIME) or DEFAULT_AUTO_SWITCH_TIME)
        if int(current_time) < int(target_time):
            return False

        today = now.date()
        last_switch = settings.get_setting(SETTING_LAST_LIST_SWITCH_DATE)
        if last_switch:
            try:
                if DateService.parse(last_switch) == today:
                    return False
            except ValidationException:
                logger.warning(f"Ignoring malformed {SETTING_LAST_LIST_SWITCH_DATE}: {last_switch}")

        logger.info(f"Executing weekly list switch (Current: {current_time}, Target: {target_time})")
        # Rotation and switch date commit together or not at all
        kids = KidService(db).switch_lists(commit=False)
        settings.set_setting(SETTING_LAST_LIST_SWITCH_DATE, today.isoformat(), commit=False)
        db.commit()
        logger.info(f"Weekly list switch done for {len(kids)} kid(s)")
        return True

    except Exception as e:
        db.rollback()
        logger.error(f"Scheduler Error (List Switch): {e}")
        return False
    finally:
        db.close()


def start_scheduler(session_factory: sessionmaker):
    """Start the scheduler"""
    if not scheduler.running:
        scheduler.add_job(
            run_weekly_switch,
            CronTrigger(minute='*'),
            args=[session_factory],
            id='weekly_list_switch',
            replace_existing=True
        )

        scheduler.start()
        logger.info(">>> APScheduler STARTED <<<")
        logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
