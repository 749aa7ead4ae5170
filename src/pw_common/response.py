"""Unified API response envelope.

Every endpoint, success or error, answers with:
{
    "code": 0,               // 0 = success, otherwise an AppError code
    "message": "success",
    "data": { ... },         // payload, or structured error details (amounts, ids)
    "timestamp": "...",
    "request_id": "req_..."  // same id as the X-Request-ID response header
}
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request

from src.pw_common.datetime_utils import utc_now


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(code=0, message=message, data=data)


def error_response(code: int, message: str, data: Any = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=data)


def bind_request_id(resp: ApiResponse, request: Request) -> ApiResponse:
    """Stamp the envelope with the id assigned by RequestLogMiddleware, if any."""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        resp.request_id = request_id
    return resp


def respond(request: Request, data: Any = None, message: str = "success") -> ApiResponse:
    return bind_request_id(success_response(data, message), request)
