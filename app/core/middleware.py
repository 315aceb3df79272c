# app/core/middleware.py
"""
Request middlewares and the application exception handler.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.exceptions import BaseAppException
from app.core.logging import get_logger, request_id as request_id_ctx, user_id as user_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id (and, once authenticated, the user id) to the
    logging context for the duration of the request.

    An id sent by an upstream proxy is reused; otherwise a UUID is minted.
    The id is echoed back in the response header.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id

        request_token = request_id_ctx.set(request_id)
        # get_current_user fills this in
        user_token = user_id_ctx.set(None)
        try:
            response = await call_next(request)
        finally:
            user_id_ctx.reset(user_token)
            request_id_ctx.reset(request_token)

        response.headers[self.header_name] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request: info below 400, warning for 4xx, error for 5xx."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None,
        }
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled error on {request.method} {request.url.path}: {exc}",
                extra={**context, "error_type": type(exc).__name__},
                exc_info=True
            )
            raise

        elapsed = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "Request completed",
            extra={
                **context,
                "status_code": response.status_code,
                "process_time": f"{elapsed:.4f}s",
            }
        )
        return response


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """Render application exceptions as ``{"error": {...}}`` with their status."""
    content = exc.to_dict()
    content["error"]["request_id"] = get_request_id(request)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)


def register_middlewares(app: FastAPI) -> None:
    # Last added runs first: the request context must be bound before access logging
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestContextMiddleware)


__all__ = [
    "RequestContextMiddleware",
    "AccessLogMiddleware",
    "app_exception_handler",
    "register_exception_handlers",
    "register_middlewares",
    "get_request_id",
]
