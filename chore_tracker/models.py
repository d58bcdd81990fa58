from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, UniqueConstraint, Index
from datetime import datetime

from chore_tracker.database import Base
from chore_tracker.constants import DEFAULT_KID_COLOR, LIST_A


class Kid(Base):
    __tablename__ = "kids"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    color = Column(String, nullable=False, default=DEFAULT_KID_COLOR)
    points = Column(Integer, nullable=False, default=0)  # Cumulative, only changed via award_points
    current_list = Column(String, nullable=False, default=LIST_A)  # "A" or "B"
    active = Column(Boolean, nullable=False, default=True)


class ChoreDefinition(Base):
    __tablename__ = "chore_lists"

    id = Column(Integer, primary_key=True, index=True)
    list_name = Column(String, nullable=False, index=True)  # "A" or "B"
    chore_name = Column(String, nullable=False)
    active = Column(Boolean, nullable=False, default=True)  # Never hard-deleted


class ExtraTask(Base):
    __tablename__ = "extra_tasks"

    id = Column(Integer, primary_key=True, index=True)
    kid_id = Column(Integer, nullable=False, index=True)  # Owner
    task_name = Column(String, nullable=False)
    active = Column(Boolean, nullable=False, default=True)


class CompletionRecord(Base):
    """Presence of a row means the task was done that day; absence means it was not."""
    __tablename__ = "task_completions"
    __table_args__ = (
        UniqueConstraint("kid_id", "task_type", "task_id", "date", name="uq_task_completion"),
        Index("ix_task_completions_kid_date", "kid_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    kid_id = Column(Integer, nullable=False)
    task_type = Column(String, nullable=False)  # "chore" or "extra"
    task_id = Column(Integer, nullable=False)  # chore_lists.id or extra_tasks.id
    date = Column(Date, nullable=False)
    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, nullable=False, unique=True, index=True)
    value = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
