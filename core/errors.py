import logging

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Muitas requisições. Tente novamente mais tarde."


def error_response(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def server_error(message: str, exc: Exception) -> HTTPException:
    """500 carrying the underlying exception text back to the caller."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": message, "details": str(exc)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # raised by the router itself (no path, or no method on that path), not by a handler
    unmatched = (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED)
    if exc.status_code in unmatched and not isinstance(exc, HTTPException):
        return error_response(status.HTTP_404_NOT_FOUND, f"Rota {request.url.path} não encontrada")

    headers = getattr(exc, "headers", None)
    if isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=headers)
    return error_response(exc.status_code, str(exc.detail), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append({"field": field, "message": err.get("msg", "")})
    logger.info("Rejected %s %s: %s", request.method, request.url.path, details)
    return error_response(status.HTTP_400_BAD_REQUEST, "Dados inválidos", details)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit hit by %s on %s", request.client, request.url.path)
    return error_response(status.HTTP_429_TOO_MANY_REQUESTS, RATE_LIMIT_MESSAGE)


def register_exception_handlers(app):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
