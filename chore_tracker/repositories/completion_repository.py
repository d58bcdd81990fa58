"""
Completion repository - Data access layer for the completion ledger.

Writes only flush: every ledger mutation is part of a larger unit of work
(read progress, write, re-read progress, award) committed by the service.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_

from chore_tracker.models import CompletionRecord


class CompletionRepository:
    """Repository for CompletionRecord data access"""

    @staticmethod
    def get(
        db: Session,
        kid_id: int,
        task_type: str,
        task_id: int,
        target_date: date
    ) -> Optional[CompletionRecord]:
        """Get the completion record for one task on one day"""
        return db.query(CompletionRecord).filter(
            and_(
                CompletionRecord.kid_id == kid_id,
                CompletionRecord.task_type == task_type,
                CompletionRecord.task_id == task_id,
                CompletionRecord.date == target_date
            )
        ).first()

    @staticmethod
    def get_for_day(db: Session, kid_id: int, target_date: date) -> List[CompletionRecord]:
        """Get all completion records of a kid for one day"""
        return db.query(CompletionRecord).filter(
            and_(
                CompletionRecord.kid_id == kid_id,
                CompletionRecord.date == target_date
            )
        ).order_by(CompletionRecord.id).all()

    @staticmethod
    def get_in_range(
        db: Session,
        start_date: date,
        end_date: date,
        kid_id: Optional[int] = None
    ) -> List[CompletionRecord]:
        """Get completion records within an inclusive date range"""
        query = db.query(CompletionRecord).filter(
            and_(
                CompletionRecord.date >= start_date,
                CompletionRecord.date <= end_date
            )
        )
        if kid_id is not None:
            query = query.filter(CompletionRecord.kid_id == kid_id)
        return query.order_by(CompletionRecord.date, CompletionRecord.id).all()

    @staticmethod
    def get_history(
        db: Session,
        kid_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[CompletionRecord]:
        """Get completion history ordered by completion time"""
        query = db.query(CompletionRecord)
        if kid_id is not None:
            query = query.filter(CompletionRecord.kid_id == kid_id)
        if start_date is not None:
            query = query.filter(CompletionRecord.date >= start_date)
        if end_date is not None:
            query = query.filter(CompletionRecord.date <= end_date)
        return query.order_by(CompletionRecord.completed_at, CompletionRecord.id).all()

    @staticmethod
    def add(db: Session, record: CompletionRecord) -> CompletionRecord:
        """Insert a completion record (flush only)"""
        db.add(record)
        db.flush()
        return record

    @staticmethod
    def delete(db: Session, record: CompletionRecord) -> None:
        """Delete a completion record (flush only)"""
        db.delete(record)
        db.flush()
