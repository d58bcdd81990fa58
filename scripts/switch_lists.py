#!/usr/bin/env python3
"""
Flip every kid's chore list (A <-> B) once.
Meant for an external cron job when the in-process scheduler is disabled.
"""

import sys

from chore_tracker.constants import DATABASE_URL, SETTING_LAST_LIST_SWITCH_DATE
from chore_tracker.database import create_db_engine, create_session_factory, init_db
from chore_tracker.services.date_service import DateService
from chore_tracker.services.kid_service import KidService
from chore_tracker.services.settings_service import SettingsService


def switch_lists(database_url):
    """Rotate lists for all kids and record the switch date"""
    print(f"Switching chore lists in: {database_url}")

    engine = create_db_engine(database_url)
    init_db(engine)
    db = create_session_factory(engine)()
    try:
        kids = KidService(db).switch_lists(commit=False)
        SettingsService(db).set_setting(
            SETTING_LAST_LIST_SWITCH_DATE, DateService.today().isoformat(), commit=False
        )
        db.commit()
        for kid in kids:
            print(f"  - {kid.name}: now on list {kid.current_list}")
        print(f"\n✓ Switched {len(kids)} kid(s)")
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    database_url = sys.argv[1] if len(sys.argv) > 1 else DATABASE_URL

    try:
        switch_lists(database_url)
    except Exception as e:
        print(f"\n✗ Switch failed: {e}")
        sys.exit(1)
