"""Translate domain exceptions into JSON error responses.

Every error body has a human readable ``message``; field-level details, when
the exception carries them, are returned under ``errors``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException

from medstore import settings
from medstore.shared.errors import AuthorizationError

logger = structlog.get_logger(__name__)


def _first_message(messages):
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list | tuple):
                if value:
                    return str(value[0])
            elif value:
                return str(value)
        return None
    if isinstance(messages, list | tuple):
        return str(messages[0]) if messages else None
    return str(messages) if messages else None


def _messages_of(exc):
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args and isinstance(exc.args[0], dict):
        # ObjectNotFoundError and other plain Protean exceptions carry the mapping as their argument
        messages = exc.args[0]
    return messages


def error_body(exc, default_message):
    messages = _messages_of(exc)
    body = {"message": _first_message(messages) or str(exc) or default_message}
    if isinstance(messages, dict):
        body["errors"] = {
            str(field): [str(m) for m in value] if isinstance(value, list | tuple) else [str(value)]
            for field, value in messages.items()
        }
    return body


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=error_body(exc, "Invalid request"))

    @app.exception_handler(InvalidOperationError)
    async def invalid_operation(request: Request, exc: InvalidOperationError):
        return JSONResponse(status_code=400, content=error_body(exc, "Operation not allowed"))

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):
        return JSONResponse(status_code=404, content=error_body(exc, "Not found"))

    @app.exception_handler(AuthorizationError)
    async def forbidden(request: Request, exc: AuthorizationError):
        return JSONResponse(status_code=403, content=error_body(exc, "Access denied"))

    @app.exception_handler(RequestValidationError)
    async def malformed_request(request: Request, exc: RequestValidationError):
        errors = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
            errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
        field, messages = next(iter(errors.items()), ("body", ["Invalid request"]))
        return JSONResponse(status_code=400, content={"message": f"{field}: {messages[0]}", "errors": errors})

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        message = str(exc) if settings.environment() == "development" else "Internal server error"
        return JSONResponse(status_code=500, content={"message": "Server error", "error": message})
