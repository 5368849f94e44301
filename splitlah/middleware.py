import logging
import secrets
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("splitlah")

SESSION_COOKIE_NAME = "splitlah_sid"
SESSION_COOKIE_MAX_AGE = 24 * 60 * 60  # 1 day; the bill itself expires sooner

SKIP_LOG_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """Assigns a session cookie to every visitor; the cookie keys their bill session."""

    async def dispatch(self, request: Request, call_next) -> Response:
        # Skip session processing for CORS preflight requests
        if request.method == "OPTIONS":
            return await call_next(request)

        session_id = request.cookies.get(SESSION_COOKIE_NAME)
        new_session = False

        if not session_id:
            session_id = secrets.token_urlsafe(24)
            new_session = True

        request.state.session_id = session_id

        response: Response = await call_next(request)

        if new_session:
            response.set_cookie(
                key=SESSION_COOKIE_NAME,
                value=session_id,
                max_age=SESSION_COOKIE_MAX_AGE,
                httponly=True,
                samesite="lax",
                secure=request.url.scheme == "https",
                path="/api",
            )

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status code, duration, and session id for each request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = round((time.time() - start) * 1000)

        path = request.url.path
        if path in SKIP_LOG_PATHS:
            return response

        session_id = getattr(request.state, "session_id", None)
        logger.info(
            f"{request.method} {path} {response.status_code}",
            extra={"extra_data": {
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": duration_ms,
                "session_id": session_id,
            }},
        )
        return response
