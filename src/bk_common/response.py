"""Response envelope shared by every endpoint.

    {
        "code": 0,              // 0 on success, the AppError code otherwise
        "message": "Order was created",
        "data": {...},          // payload; on error the error details or null
        "timestamp": "2024-06-05T09:30:00+00:00",
        "request_id": "req_a1b2c3d4e5f6"
    }

The request id is the one RequestLogMiddleware assigned, so a response can
be matched to its log line.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def success_response(
    data: Any = None, message: str = "success", request_id: str | None = None
) -> ApiResponse:
    return ApiResponse(
        code=0, message=message, data=data, request_id=request_id or _new_request_id()
    )


def error_response(
    code: int, message: str, data: Any = None, request_id: str | None = None
) -> ApiResponse:
    return ApiResponse(
        code=code, message=message, data=data, request_id=request_id or _new_request_id()
    )
