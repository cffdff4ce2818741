import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.core.errors import NotFoundError
from wellness_api.db.models.setting import Setting
from wellness_api.db.repositories.setting_repository import SettingRepository
from wellness_api.domains.settings.schemas import SettingUpsert


class SettingService:
    """Site-wide key/value settings"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = SettingRepository(session)

    async def get(self, key: str) -> Setting:
        setting = await self.repository.get_by_key(key)
        if setting is None:
            raise NotFoundError(f"Setting with key '{key}' not found.")
        return setting

    async def upsert(self, data: SettingUpsert) -> Setting:
        """Create the setting or overwrite its value"""
        setting = await self.repository.get_by_key(data.key)
        if setting is None:
            setting = Setting(id=uuid.uuid4(), key=data.key, value=data.value)
        else:
            setting.value = data.value
        return await self.repository.add(setting)
