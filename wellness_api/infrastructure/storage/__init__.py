from wellness_api.core.config import Settings
from wellness_api.infrastructure.storage.base import AssetDownload, RemoteAssetStore
from wellness_api.infrastructure.storage.cloudinary import CloudinaryAssetStore
from wellness_api.infrastructure.storage.local import LocalAssetStore


def build_asset_store(settings: Settings) -> RemoteAssetStore:
    """Instantiate the asset store selected by ``asset_store_engine``"""
    engine = settings.asset_store_engine.lower()
    if engine == "cloudinary":
        return CloudinaryAssetStore(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            base_url=settings.cloudinary_api_base_url,
            timeout=settings.asset_store_timeout,
        )
    if engine == "local":
        return LocalAssetStore(settings.local_upload_dir, settings.local_upload_url_prefix)
    raise ValueError(f"Unsupported asset store engine '{settings.asset_store_engine}'")


__all__ = [
    "AssetDownload",
    "CloudinaryAssetStore",
    "LocalAssetStore",
    "RemoteAssetStore",
    "build_asset_store",
]
