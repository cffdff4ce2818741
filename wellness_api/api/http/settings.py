from fastapi import APIRouter, Depends

from wellness_api.api.dependencies import get_setting_service
from wellness_api.api.responses import success
from wellness_api.core.auth import require_admin
from wellness_api.domains.settings.schemas import SettingRead, SettingUpsert
from wellness_api.domains.settings.services import SettingService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/{key}")
async def get_setting(key: str, service: SettingService = Depends(get_setting_service)):
    setting = await service.get(key)
    return success(SettingRead.model_validate(setting).model_dump(mode="json"))


@router.post("", dependencies=[Depends(require_admin)])
async def create_or_update_setting(setting_data: SettingUpsert, service: SettingService = Depends(get_setting_service)):
    setting = await service.upsert(setting_data)
    return success(SettingRead.model_validate(setting).model_dump(mode="json"), message="Setting updated successfully!")
