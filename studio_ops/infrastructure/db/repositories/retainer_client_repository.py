"""
Retainer Client Repository
CRUD operations for retainer configuration
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import date
from decimal import Decimal
from typing import Optional

from studio_ops.infrastructure.db.models import RetainerClientModel
from studio_ops.domain.models import RetainerConfig


class RetainerClientRepository:
    """Repository for RetainerConfig data access"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def create(self, client_name: str) -> RetainerConfig:
        """
        Add a client to retainers, appended after the current last entry

        Args:
            client_name: Client name (trimmed)

        Returns:
            Created RetainerConfig
        """
        result = await self.session.execute(select(func.max(RetainerClientModel.display_order)))
        highest = result.scalar()

        model = RetainerClientModel(
            client_name=client_name.strip(),
            display_order=highest + 1 if highest is not None else 0,
        )

        self.session.add(model)
        await self.session.flush()

        return self._to_domain(model)

    async def get_by_client_name(self, client_name: str) -> Optional[RetainerConfig]:
        model = await self._get_model(client_name)
        return self._to_domain(model) if model else None

    async def list_all(self) -> list[RetainerConfig]:
        """All retainer clients, by display order then name"""
        result = await self.session.execute(
            select(RetainerClientModel).order_by(
                RetainerClientModel.display_order.asc(),
                RetainerClientModel.client_name.asc(),
            )
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update_settings(
        self,
        client_name: str,
        monthly_hours: Optional[Decimal],
        rollover_hours: Optional[Decimal],
        start_date: Optional[date],
        agreed_days_per_week: Optional[Decimal],
        agreed_days_per_month: Optional[Decimal],
        hours_per_day: Optional[Decimal],
    ) -> Optional[RetainerConfig]:
        """
        Replace retainer settings

        Returns:
            Updated RetainerConfig, or None if the client is not a retainer
        """
        model = await self._get_model(client_name)
        if model is None:
            return None

        model.monthly_hours = monthly_hours
        model.rollover_hours = rollover_hours
        model.start_date = start_date
        model.agreed_days_per_week = agreed_days_per_week
        model.agreed_days_per_month = agreed_days_per_month
        model.hours_per_day = hours_per_day

        await self.session.flush()
        return self._to_domain(model)

    async def delete(self, client_name: str) -> bool:
        model = await self._get_model(client_name)
        if model is None:
            return False
        await self.session.delete(model)
        await self.session.flush()
        return True

    async def _get_model(self, client_name: str) -> Optional[RetainerClientModel]:
        result = await self.session.execute(
            select(RetainerClientModel).where(RetainerClientModel.client_name == client_name)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: Optional[RetainerClientModel]) -> Optional[RetainerConfig]:
        """Convert database model to domain entity"""
        if model is None:
            return None

        return RetainerConfig(
            id=model.id,
            client_name=model.client_name,
            display_order=model.display_order,
            monthly_hours=model.monthly_hours,
            rollover_hours=model.rollover_hours,
            hours_per_day=model.hours_per_day,
            agreed_days_per_week=model.agreed_days_per_week,
            agreed_days_per_month=model.agreed_days_per_month,
            start_date=model.start_date,
        )
