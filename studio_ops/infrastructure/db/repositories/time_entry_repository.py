"""
Time Entry Repository
Logged time for retainer clients
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import date
from decimal import Decimal
from typing import Optional

from studio_ops.infrastructure.db.models import (
    ProjectModel,
    TaskModel,
    TimeEntryModel,
    UserModel,
)
from studio_ops.domain.models import TimeEntry


class TimeEntryRepository:
    """Repository for TimeEntry data access"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        task_id: int,
        entry_date: date,
        hours: Decimal,
        user_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """
        Log time against a task; project is taken from the task

        Raises:
            ValueError: If the task does not exist or hours are not positive
        """
        if hours <= Decimal('0'):
            raise ValueError("Hours must be positive")

        task = await self.session.get(TaskModel, task_id)
        if task is None:
            raise ValueError(f"Task {task_id} not found")

        model = TimeEntryModel(
            task_id=task_id,
            project_id=task.project_id,
            user_id=user_id,
            date=entry_date,
            hours=hours,
            notes=notes,
        )
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def list_for_client(
        self,
        client_name: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TimeEntry]:
        """
        All entries on the client's projects, ascending by date

        Args:
            client_name: Client whose projects to include
            start_date: Inclusive lower bound
            end_date: Inclusive upper bound
        """
        query = (
            select(
                TimeEntryModel,
                TaskModel.name,
                ProjectModel.name,
                UserModel.full_name,
            )
            .join(TaskModel, TimeEntryModel.task_id == TaskModel.id)
            .join(ProjectModel, TimeEntryModel.project_id == ProjectModel.id)
            .outerjoin(UserModel, TimeEntryModel.user_id == UserModel.id)
            .where(ProjectModel.client_name == client_name)
        )
        if start_date is not None:
            query = query.where(TimeEntryModel.date >= start_date)
        if end_date is not None:
            query = query.where(TimeEntryModel.date <= end_date)

        result = await self.session.execute(
            query.order_by(TimeEntryModel.date.asc(), TimeEntryModel.id.asc())
        )

        return [
            TimeEntry(
                id=entry.id,
                date=entry.date,
                hours=entry.hours,
                task_name=task_name,
                project_name=project_name,
                user_name=user_name,
                notes=entry.notes,
                project_id=entry.project_id,
                task_id=entry.task_id,
            )
            for entry, task_name, project_name, user_name in result.all()
        ]
