"""Exception handlers rendering the JSON error envelope."""
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import BaseAPIException, ValidationFailedError


def api_error_response(exc: BaseAPIException) -> JSONResponse:
    content: Dict[str, Any] = {
        "success": False,
        "message": exc.message,
        "error_code": exc.error_code,
    }
    if exc.errors is not None:
        content["errors"] = exc.errors
    if exc.details:
        content["details"] = exc.details

    return JSONResponse(status_code=exc.status_code, content=content)


def format_validation_errors(errors) -> List[Dict[str, str]]:
    """Flatten pydantic error locations into ``{field, message}`` pairs."""
    formatted = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({
            "field": ".".join(location) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


async def handle_api_exception(request: Request, exc: BaseAPIException) -> JSONResponse:
    return api_error_response(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return api_error_response(
        ValidationFailedError(errors=format_validation_errors(exc.errors()))
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message, "error_code": "HTTP_EXCEPTION"},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
