from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.db.models.setting import Setting
from wellness_api.db.repositories.base import BaseRepository


class SettingRepository(BaseRepository[Setting]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Setting)

    async def get_by_key(self, key: str) -> Optional[Setting]:
        result = await self.session.execute(select(Setting).where(Setting.key == key))
        return result.scalar_one_or_none()
