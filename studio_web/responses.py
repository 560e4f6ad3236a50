"""
Response envelope and error translation.

Every response body is ``{"success": ..., ..., "timestamp": ...}``. Failures
carry a stable ``code`` that clients branch on.
"""

import traceback
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studio_cms.services.validator import format_errors
from studio_cms.utils.exceptions import CMSError
from studio_cms.utils.logger import get_logger
from studio_cms.utils.timestamps import utc_now_iso

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def success_response(data: Any = None, message: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(extra)
    body["timestamp"] = utc_now_iso()
    return body


def error_body(
    message: str,
    code: str,
    details: Optional[List[Dict[str, Any]]] = None,
    stack: Optional[List[str]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = details
    if stack:
        body["stack"] = stack
    body["timestamp"] = utc_now_iso()
    return body


def error_response(
    status_code: int,
    message: str,
    code: str,
    details: Optional[List[Dict[str, Any]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, code, details), headers=headers)


def _is_production(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.is_production)


def _server_error(request: Request, exc: Exception, status_code: int, message: str, code: str) -> JSONResponse:
    if _is_production(request):
        return JSONResponse(status_code=status_code, content=error_body(GENERIC_ERROR_MESSAGE, code))
    stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=status_code, content=error_body(message, code, stack=stack))


async def cms_error_handler(request: Request, exc: CMSError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code, error=exc.message)
        return _server_error(request, exc, exc.status_code, exc.message, exc.code)

    headers = None
    retry_after = getattr(exc, "retry_after", None)
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}
    return error_response(exc.status_code, exc.message, exc.code, exc.details, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return error_response(400, "Invalid JSON format", "INVALID_JSON")
    # Drop the leading "body"/"path" segment FastAPI adds to locations
    trimmed = [{**error, "loc": tuple(error.get("loc", ()))[1:] or error.get("loc", ())} for error in errors]
    return error_response(400, "Validation failed", "VALIDATION_ERROR", format_errors(trimmed))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, f"Route {request.url.path} not found", "ROUTE_NOT_FOUND")
    if exc.status_code == 405:
        return error_response(405, "Method not allowed", "METHOD_NOT_ALLOWED")
    return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR", headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error=str(exc))
    return _server_error(request, exc, 500, str(exc) or GENERIC_ERROR_MESSAGE, "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CMSError, cms_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
