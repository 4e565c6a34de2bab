"""
Project Repository
Client projects, their tasks, and quoted vs logged hours
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import date
from decimal import Decimal
from typing import Optional

from studio_ops.infrastructure.db.models import ProjectModel, TaskModel, TimeEntryModel, UserModel
from studio_ops.domain.models import ProjectHours, ProjectTask


class ProjectRepository:
    """Repository for client projects"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_project(self, name: str, client_name: str, status: Optional[str] = None) -> int:
        model = ProjectModel(name=name, client_name=client_name, status=status)
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def create_task(
        self,
        project_id: int,
        name: str,
        quoted_hours: Optional[Decimal] = None,
        timeline_start: Optional[date] = None,
        timeline_end: Optional[date] = None,
        is_subtask: bool = True,
    ) -> int:
        model = TaskModel(
            project_id=project_id,
            name=name,
            quoted_hours=quoted_hours,
            timeline_start=timeline_start,
            timeline_end=timeline_end,
            is_subtask=is_subtask,
        )
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def create_user(self, full_name: str) -> int:
        model = UserModel(full_name=full_name)
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def list_client_names(self) -> list[str]:
        """Distinct non-empty client names across projects, sorted"""
        result = await self.session.execute(
            select(ProjectModel.client_name)
            .where(ProjectModel.client_name.is_not(None), ProjectModel.client_name != "")
            .distinct()
            .order_by(ProjectModel.client_name.asc())
        )
        return list(result.scalars().all())

    async def list_tasks(self, client_name: str) -> list[ProjectTask]:
        """Subtasks on the client's projects, newest project first"""
        result = await self.session.execute(
            select(TaskModel, ProjectModel.name, ProjectModel.status)
            .join(ProjectModel, TaskModel.project_id == ProjectModel.id)
            .where(ProjectModel.client_name == client_name, TaskModel.is_subtask.is_(True))
            .order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc(), TaskModel.id.asc())
        )

        return [
            ProjectTask(
                task_id=task.id,
                name=task.name,
                project_id=task.project_id,
                project_name=project_name,
                project_status=project_status,
                quoted_hours=task.quoted_hours,
                timeline_start=task.timeline_start,
                timeline_end=task.timeline_end,
            )
            for task, project_name, project_status in result.all()
        ]

    async def list_project_hours(
        self,
        client_name: str,
        start_date: Optional[date] = None,
    ) -> list[ProjectHours]:
        """
        Quoted hours (sum over subtasks) and logged hours (sum over entries
        on those subtasks) for each of the client's projects

        Args:
            client_name: Client whose projects to include
            start_date: Only count time logged on or after this date
        """
        quoted = (
            select(
                TaskModel.project_id.label("project_id"),
                func.coalesce(func.sum(TaskModel.quoted_hours), 0).label("quoted"),
            )
            .where(TaskModel.is_subtask.is_(True))
            .group_by(TaskModel.project_id)
            .subquery()
        )

        logged_query = (
            select(
                TaskModel.project_id.label("project_id"),
                func.coalesce(func.sum(TimeEntryModel.hours), 0).label("logged"),
            )
            .select_from(TimeEntryModel)
            .join(TaskModel, TimeEntryModel.task_id == TaskModel.id)
            .where(TaskModel.is_subtask.is_(True))
        )
        if start_date is not None:
            logged_query = logged_query.where(TimeEntryModel.date >= start_date)
        logged = logged_query.group_by(TaskModel.project_id).subquery()

        result = await self.session.execute(
            select(
                ProjectModel.id,
                ProjectModel.name,
                ProjectModel.status,
                func.coalesce(quoted.c.quoted, 0),
                func.coalesce(logged.c.logged, 0),
            )
            .outerjoin(quoted, quoted.c.project_id == ProjectModel.id)
            .outerjoin(logged, logged.c.project_id == ProjectModel.id)
            .where(ProjectModel.client_name == client_name)
            .order_by(ProjectModel.id.asc())
        )

        return [
            ProjectHours(
                project_id=project_id,
                name=name,
                status=status,
                quoted_hours=Decimal(str(quoted_hours)),
                logged_hours=Decimal(str(logged_hours)),
            )
            for project_id, name, status, quoted_hours, logged_hours in result.all()
        ]
