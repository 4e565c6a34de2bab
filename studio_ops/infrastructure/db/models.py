"""
Database Models (SQLAlchemy ORM)
Retainer clients, the projects/tasks they own, and logged time
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, Date, DateTime,
    Boolean, ForeignKey, Text, Index
)
from sqlalchemy.orm import relationship

from studio_ops.infrastructure.db.database import Base
from studio_ops.utils.time import now_local_naive


class RetainerClientModel(Base):
    """Retainer settings per client"""
    __tablename__ = "retainer_clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_name = Column(String(255), nullable=False, unique=True, index=True)
    display_order = Column(Integer, nullable=False, default=0)
    monthly_hours = Column(Numeric(10, 2), nullable=True)
    rollover_hours = Column(Numeric(10, 2), nullable=True)
    hours_per_day = Column(Numeric(5, 2), nullable=True)
    agreed_days_per_week = Column(Numeric(5, 2), nullable=True)
    agreed_days_per_month = Column(Numeric(5, 2), nullable=True)
    start_date = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_local_naive)
    updated_at = Column(DateTime, nullable=False, default=now_local_naive, onupdate=now_local_naive)


class ProjectModel(Base):
    """Client project (synced from the project board)"""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    client_name = Column(String(255), nullable=True, index=True)
    status = Column(String(50), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_local_naive)

    tasks = relationship("TaskModel", back_populates="project")


class TaskModel(Base):
    """Task within a project"""
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    quoted_hours = Column(Numeric(10, 2), nullable=True)
    timeline_start = Column(Date, nullable=True)
    timeline_end = Column(Date, nullable=True)
    # Quoted hours and logged time live on subtasks; parent items only group them
    is_subtask = Column(Boolean, nullable=False, default=True)

    project = relationship("ProjectModel", back_populates="tasks")


class UserModel(Base):
    """Studio team member"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class TimeEntryModel(Base):
    """Logged time against a task"""
    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    date = Column(Date, nullable=False)
    hours = Column(Numeric(6, 2), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_local_naive)

    __table_args__ = (
        Index("ix_time_entries_project_date", "project_id", "date"),
    )
