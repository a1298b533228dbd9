"""Unified API response envelope.

Every endpoint except /health returns:
{
    "code": 0,           // 0=success, otherwise the AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",  // ISO-8601 UTC
    "request_id": "..."
}
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field

from src.pm_common.datetime_utils import utc_now


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)
