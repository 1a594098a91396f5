from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bindash.db.models.bin import Collection


class CollectionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_between(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[Collection]:
        """Collections created within [date_from, date_to], oldest first. Open bounds are unbounded."""
        stmt = select(Collection)
        if date_from is not None:
            stmt = stmt.where(Collection.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(Collection.created_at <= date_to)
        stmt = stmt.order_by(Collection.created_at, Collection.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
