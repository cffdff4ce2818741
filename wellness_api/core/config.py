from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    database_echo: bool = False
    auto_create_schema: bool = True

    environment: str = "development"
    log_level: str = "info"
    log_dir: Optional[str] = None
    timezone: str = "UTC"
    cors_origins: List[str] = ["*"]

    # Mutating routes are open when no secret is configured
    admin_jwt_secret: Optional[str] = None
    admin_jwt_algorithm: str = "HS256"

    # Remote asset store
    asset_store_engine: str = "cloudinary"
    asset_store_timeout: float = 60.0
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_api_base_url: str = "https://api.cloudinary.com/v1_1"
    local_upload_dir: str = "uploads"
    local_upload_url_prefix: str = "/uploads"

    # Payment gateway
    cashfree_app_id: str = ""
    cashfree_secret_key: str = ""
    cashfree_api_base_url: str = "https://sandbox.cashfree.com/pg"
    cashfree_api_version: str = "2023-08-01"
    payment_gateway_timeout: float = 30.0
    frontend_url: str = "http://localhost:3000"
    backend_public_url: str = "http://localhost:8000"

    strict_slug_collections: List[str] = []

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def admin_auth_enabled(self) -> bool:
        return bool(self.admin_jwt_secret)
