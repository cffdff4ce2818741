from typing import Type

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.core.config import Settings
from wellness_api.core.db import get_db
from wellness_api.domains.appointments.services import AppointmentService
from wellness_api.domains.content.assets import AssetLifecycleManager
from wellness_api.domains.content.registry import ContentType
from wellness_api.domains.content.services import ContentService
from wellness_api.domains.content.slugs import SlugPolicy
from wellness_api.domains.payments.services import PaymentService
from wellness_api.domains.settings.services import SettingService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_asset_manager(request: Request) -> AssetLifecycleManager:
    return AssetLifecycleManager(request.app.state.asset_store)


def content_service(content_type: ContentType, service_class: Type[ContentService] = ContentService):
    """Dependency factory building a service for one collection"""

    async def dependency(
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(get_settings),
        asset_manager: AssetLifecycleManager = Depends(get_asset_manager),
    ) -> ContentService:
        policy = (
            SlugPolicy.STRICT
            if content_type.collection in settings.strict_slug_collections
            else SlugPolicy.DISAMBIGUATE
        )
        return service_class(db, content_type, asset_manager, slug_policy=policy)

    return dependency


async def get_appointment_service(db: AsyncSession = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


async def get_setting_service(db: AsyncSession = Depends(get_db)) -> SettingService:
    return SettingService(db)


async def get_payment_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> PaymentService:
    return PaymentService(db, request.app.state.payment_gateway, settings, request.app.state.fulfillment)
