import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _envelope(request: Request, status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {"code": code, "message": message},
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _envelope(
        request,
        exc.status_code,
        code=detail if isinstance(exc.detail, str) else "http_error",
        message=detail,
        headers=getattr(exc, "headers", None),
    )


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except StarletteHTTPException as exc:
        return await http_exception_handler(request, exc)
    except Exception:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _envelope(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="internal_error",
            message="An unexpected error occurred",
        )


def install_error_handlers(app: FastAPI) -> None:
    """Route HTTPExceptions raised in handlers through the same envelope."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.middleware("http")(error_envelope_middleware)
