import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.errors import FeedbackError, PersistenceError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> Response:
    """JSON for API callers, plain text for the browser-facing pages."""
    if request.url.path.startswith(API_PREFIX):
        return JSONResponse(
            status_code=status_code,
            content={"ok": False, "error": message},
            headers=headers,
        )
    return PlainTextResponse(message, status_code=status_code, headers=headers)


async def feedback_exception_handler(request: Request, exc: FeedbackError) -> Response:
    if isinstance(exc, PersistenceError):
        # Detail was logged by the gateway; callers only get the generic text.
        logger.error(f"{request.method} {request.url.path} failed during {exc.operation}")
        return error_response(request, exc.status_code, exc.public_message)
    return error_response(request, exc.status_code, exc.message, exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"ok": False, "error": "Not found"})
    return error_response(request, exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    return error_response(request, 400, "Invalid request body.")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FeedbackError, feedback_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
