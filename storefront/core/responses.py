# storefront/core/responses.py
"""
Uniform JSON envelope for every handler.

Success:
    {"success": true,  "message": "...", "data": {...},  "statusCode": 200}
Error:
    {"success": false, "message": "...", "error": "...", "statusCode": 404}
"""

import logging
from typing import Any, Generic, Literal, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.exceptions import ServerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SuccessKey = Literal["FETCH", "CREATE", "UPDATE", "DELETE"]

SUCCESS_MESSAGES: dict[str, str] = {
    "FETCH": "Data fetched successfully",
    "CREATE": "Record created successfully",
    "UPDATE": "Record updated successfully",
    "DELETE": "Record deleted successfully",
}

ERROR_MESSAGES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Validation failed",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized access",
    status.HTTP_403_FORBIDDEN: "Access denied",
    status.HTTP_404_NOT_FOUND: "Resource not found",
    status.HTTP_409_CONFLICT: "Conflict",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal server error",
}


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope, used as `response_model=ApiResponse[SomeRead]`."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    data: T | None = None
    status_code: int = Field(alias="statusCode")


def success_response(
    data: Any = None,
    key: SuccessKey = "FETCH",
    status_code: int = status.HTTP_200_OK,
) -> dict[str, Any]:
    return {
        "success": True,
        "message": SUCCESS_MESSAGES[key],
        "data": data,
        "statusCode": status_code,
    }


def error_response(status_code: int, error: Any = None) -> dict[str, Any]:
    return {
        "success": False,
        "message": ERROR_MESSAGES.get(status_code, "Request failed"),
        "error": error,
        "statusCode": status_code,
    }


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(status.HTTP_400_BAD_REQUEST, errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = ServerError("Something went wrong")
    return JSONResponse(
        status_code=error.status_code,
        content=error_response(error.status_code, error.detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
