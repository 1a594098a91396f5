from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bindash.db.models.admin import Admin


class AdminRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_active(self, admin_id: int) -> Optional[Admin]:
        result = await self._session.execute(
            select(Admin).where(Admin.id == admin_id, Admin.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def create(self, username: str, full_name: Optional[str] = None) -> Admin:
        admin = Admin(username=username, full_name=full_name)
        self._session.add(admin)
        await self._session.flush()
        return admin
