import logging
import time

from fastapi import Request, status

from core.errors import error_response

logger = logging.getLogger("api.access")

# same defaults helmet applies to an express app
SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self';base-uri 'self';frame-ancestors 'self';object-src 'none'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url, response.status_code, elapsed_ms)
    return response


async def catch_unhandled_errors(request: Request, call_next):
    """Render unexpected failures as JSON 500s inside the CORS and header middleware."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=e)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro interno do servidor", str(e))
