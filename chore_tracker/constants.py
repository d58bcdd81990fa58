"""
Application constants and environment configuration.
Values read from the environment are resolved once, at import time.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/chores.db")

# SQLAlchemy no longer accepts the postgres:// alias
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Logging ---
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/chore-tracker"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"
LOG_DIR = os.getenv("CHORE_TRACKER_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("CHORE_TRACKER_LOG_FILE", "app.log")

# --- HTTP ---
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CHORE_TRACKER_CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]
ADMIN_PIN_HEADER = "X-Admin-Pin"

# --- Scheduler ---
SCHEDULER_ENABLED = os.getenv("CHORE_TRACKER_SCHEDULER_ENABLED", "true").lower() in ("1", "true", "yes")

# Task types recorded in the completion ledger
TASK_TYPE_CHORE = "chore"
TASK_TYPE_EXTRA = "extra"
TASK_TYPES = (TASK_TYPE_CHORE, TASK_TYPE_EXTRA)

# Chore lists (kids alternate between them weekly)
LIST_A = "A"
LIST_B = "B"
LIST_NAMES = (LIST_A, LIST_B)

DEFAULT_KID_COLOR = "#FF6B6B"

# Points awarded when every active extra task of a day is done
POINTS_PER_EXTRA_TASK_DAY = 1

# Setting keys
SETTING_ADMIN_PIN = "admin_pin"
SETTING_AUTO_SWITCH_ENABLED = "auto_switch_enabled"
SETTING_AUTO_SWITCH_DAY = "auto_switch_day"
SETTING_AUTO_SWITCH_TIME = "auto_switch_time"
SETTING_LAST_LIST_SWITCH_DATE = "last_list_switch_date"

DEFAULT_ADMIN_PIN = "1234"
DEFAULT_AUTO_SWITCH_DAY = "sun"
DEFAULT_AUTO_SWITCH_TIME = "00:00"

DEFAULT_SETTINGS = {
    SETTING_ADMIN_PIN: DEFAULT_ADMIN_PIN,
    SETTING_AUTO_SWITCH_ENABLED: "false",
}

WEEKDAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def other_list(list_name: str) -> str:
    """Return the chore list a kid rotates to from list_name"""
    return LIST_B if list_name == LIST_A else LIST_A
