import math
from typing import Any, Dict, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None, status_code: int = status.HTTP_200_OK, **extra: Any) -> JSONResponse:
    """Uniform success envelope: ``{"success": true, "data": ..., ...}``"""
    content: Dict[str, Any] = {"success": True}
    if data is not None:
        content["data"] = data
    content.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(content=jsonable_encoder(content), status_code=status_code)


def failure(message: str, status_code: int, stack: Optional[str] = None) -> JSONResponse:
    """Uniform error envelope: ``{"success": false, "error": ...}``"""
    content: Dict[str, Any] = {"success": False, "error": message}
    if stack:
        content["stack"] = stack
    return JSONResponse(content=content, status_code=status_code)


def pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    return {
        "current_page": page,
        "total_pages": math.ceil(total / limit) if limit else 1,
        "has_next_page": page * limit < total,
        "has_prev_page": page > 1,
    }
