"""API middleware for logging, error handling and security headers."""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.exceptions import BaseAPIException
from ..core.logging import RequestLogger
from ..config import settings
from .errors import api_error_response

REQUEST_ID_HEADER = "X-Request-ID"


def request_id_for(request: Request) -> str:
    """Reuse a caller-supplied request id when it is short and printable."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if 0 < len(incoming) <= 64 and incoming.isprintable():
        return incoming
    return uuid.uuid4().hex


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line when a request starts and one when it completes."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request_id_for(request)
        request.state.request_id = request_id
        path = request.url.path

        started = time.perf_counter()
        RequestLogger.log_request(
            method=request.method,
            path=path,
            request_id=request_id,
            extra_data={
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
            },
        )

        response = await call_next(request)

        RequestLogger.log_response(
            method=request.method,
            path=path,
            status_code=response.status_code,
            response_time_ms=round((time.perf_counter() - started) * 1000, 2),
            request_id=request_id,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Last line of defence: anything no exception handler answered."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except BaseAPIException as e:
            return api_error_response(e)

        except Exception as e:
            RequestLogger.log_unhandled_error(
                method=request.method,
                path=request.url.path,
                request_id=getattr(request.state, "request_id", None),
            )
            content = {
                "success": False,
                "message": "Internal server error",
                "error_code": "INTERNAL_ERROR",
            }
            if settings.is_development:
                content["details"] = {"error": str(e)}

            return JSONResponse(status_code=500, content=content)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds browser hardening headers; API responses are never framed or sniffed."""

    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "no-referrer",
        "Cache-Control": "no-store",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
