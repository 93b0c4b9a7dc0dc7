import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from aiplayground import auth
from aiplayground.auth import router as auth_router
from aiplayground.config import get_settings
from aiplayground.exceptions import (
    AuthenticationError,
    ConfigurationError,
    IntegrationError,
    InvalidRequestError,
    RateLimitError,
    WebpageUnavailableError,
)
from aiplayground.mcp_server import mcp
from aiplayground.models.common import ErrorResponse, ServiceStatus, StatusResponse
from aiplayground.pages import PROTECTED_PREFIXES
from aiplayground.pages import router as pages_router
from aiplayground.routers.analyze import router as analyze_router
from aiplayground.routers.history import router as history_router

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

UNGUARDED_PREFIXES = ("/api", "/mcp", "/static", "/favicon.ico", "/docs", "/redoc", "/openapi.json")


# --- Middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content={"error_code": "forbidden", "message": "Localhost access only"},
            )
        return await call_next(request)


class AuthRedirectMiddleware(BaseHTTPMiddleware):
    """Page-level sign-in redirects.

    Signed-in users are sent from /auth/* to /dashboard, anonymous users are sent from
    protected pages to /auth/signin. An expired access token is refreshed from the
    refresh cookie and both cookies are re-issued on the response.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(UNGUARDED_PREFIXES):
            return await call_next(request)

        user, refreshed = await run_in_threadpool(
            auth.resolve_session,
            request.cookies.get(auth.ACCESS_COOKIE),
            request.cookies.get(auth.REFRESH_COOKIE),
        )
        request.state.user = user

        if user and path.startswith("/auth"):
            response = RedirectResponse("/dashboard")
        elif not user and path.startswith(PROTECTED_PREFIXES):
            response = RedirectResponse("/auth/signin")
        else:
            response = await call_next(request)

        if refreshed is not None:
            auth.set_session_cookies(response, refreshed)
        return response


# --- FastAPI app ---

api = FastAPI(title="AI Playground", version="0.1.0")
api.add_middleware(AuthRedirectMiddleware)
api.include_router(auth_router)
api.include_router(analyze_router)
api.include_router(history_router)
api.include_router(pages_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    settings = get_settings()
    gemini_ready = bool(settings.gemini_api_key)
    supabase_ready = auth.is_configured()
    return StatusResponse(
        model=settings.gemini_model,
        services={
            "gemini": ServiceStatus(
                configured=gemini_ready,
                message="Ready" if gemini_ready else "Set GEMINI_API_KEY in .env",
            ),
            "supabase": ServiceStatus(
                configured=supabase_ready,
                message="Ready" if supabase_ready else "Set SUPABASE_URL and SUPABASE_ANON_KEY in .env",
            ),
        },
    )


# --- Exception handlers ---

def _error(status_code: int, error_code: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error_code=error_code, message=str(exc)).model_dump())


@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return _error(401, "auth_error", exc)


@api.exception_handler(ConfigurationError)
async def config_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error: %s", exc)
    return _error(500, "config_error", exc)


@api.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    return _error(400, "invalid_request", exc)


@api.exception_handler(WebpageUnavailableError)
async def webpage_unavailable_handler(request: Request, exc: WebpageUnavailableError):
    return _error(400, "webpage_unavailable", exc)


@api.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    logger.error("Integration error on %s: %s", request.url.path, exc)
    return _error(500, "integration_error", exc)


@api.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    return _error(429, "rate_limit", exc)


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    routes=[
        Mount("/mcp", app=mcp_app, middleware=[Middleware(LocalhostOnlyMiddleware)]),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    uvicorn.run(
        "aiplayground.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def setup_database():
    """Create the content_history table in the configured Supabase project."""
    from aiplayground.services.history import setup_table

    setup_table()


if __name__ == "__main__":
    run()
