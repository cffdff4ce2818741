from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from wellness_api.core.config import Settings
from wellness_api.core.errors import UnauthorizedError
from wellness_api.core.security import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


async def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[dict]:
    """Gate mutating routes behind an externally issued admin token."""
    settings: Settings = request.app.state.settings
    if not settings.admin_auth_enabled:
        return None

    if credentials is None:
        raise UnauthorizedError("Missing bearer token")

    payload = verify_token(credentials.credentials, settings.admin_jwt_secret, settings.admin_jwt_algorithm)
    if not payload or payload.get("role") != "admin":
        raise UnauthorizedError("Could not validate credentials")

    return payload
