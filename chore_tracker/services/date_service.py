"""
Date calculation service.
Handles "today", ISO date parsing and week ranges. All dates are calendar days
without a time component; "today" is the wall-clock UTC date.
"""
from datetime import datetime, date, timedelta, timezone
from typing import List, Optional, Tuple

from chore_tracker.exceptions import ValidationException


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def today() -> date:
        """Current calendar day in UTC"""
        return datetime.now(timezone.utc).date()

    @staticmethod
    def resolve(target_date: Optional[date]) -> date:
        """Return target_date, or today when it is not given"""
        return target_date if target_date is not None else DateService.today()

    @staticmethod
    def parse(value: str) -> date:
        """
        Parse an ISO YYYY-MM-DD string.

        Raises:
            ValidationException: if the value is not a valid ISO date
        """
        try:
            return date.fromisoformat(value)
        except (TypeError, ValueError):
            raise ValidationException("date", f"'{value}' is not a YYYY-MM-DD date")

    @staticmethod
    def week_start(day: date) -> date:
        """Monday of the week containing day"""
        return day - timedelta(days=day.weekday())

    @staticmethod
    def week_range(start: date) -> Tuple[date, date]:
        """Inclusive (start, end) of the seven days beginning at start"""
        return start, start + timedelta(days=6)

    @staticmethod
    def days_in_range(start: date, end: date) -> List[date]:
        """Every calendar day from start to end inclusive"""
        if end < start:
            return []
        return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
