import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from palette.core.config import get_settings
from palette.core.errors import AuthError, PaletteError
from palette.core.logging import configure_logging
from palette.routers import diaries as diaries_router
from palette.routers import users as users_router

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, no sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def palette_error_handler(request: Request, exc: PaletteError) -> JSONResponse:
    if isinstance(exc, AuthError):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(title="Palette Diary API")

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update(
            {
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    if allowed_cors:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    application.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    application.add_exception_handler(PaletteError, palette_error_handler)

    @application.get("/health")
    def health():
        return {"status": "ok"}

    application.include_router(users_router.router)
    application.include_router(diaries_router.router)
    return application


app = create_app()
