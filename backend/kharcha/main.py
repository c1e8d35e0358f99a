from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from kharcha import __version__
from kharcha.core.config import settings
from kharcha.core.database import init_db, close_db
from kharcha.core.exceptions import KharchaError
from kharcha.core.logging_config import logger
from kharcha.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from kharcha.core.rate_limiter import limiter, rate_limit_exceeded_handler
from kharcha.api.v1.router import api_router
from kharcha.modules.auth.service import AuthService
from kharcha.modules.auth.session import SessionTokenProvider
from kharcha.modules.auth.sign_in import SignInFlowRegistry
from kharcha.services.email_service import EmailService
from kharcha.web import pages


def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")
    if not settings.SECRET_KEY or settings.SECRET_KEY == "CHANGE_ME":
        errors.append("SECRET_KEY is not set or using default value")
    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if settings.EMAIL_PROVIDER == "resend" and not settings.RESEND_API_KEY:
        warnings.append("RESEND_API_KEY not set - sign-in emails will fail")
    if settings.EMAIL_PROVIDER == "smtp" and not (settings.SMTP_USER and settings.SMTP_PASSWORD):
        warnings.append("SMTP credentials not set - sign-in emails will fail")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] ✓ Critical configuration validated")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    validate_critical_config()
    await init_db()

    # Until here every gated page renders the loading state
    app.state.session_provider.start()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    app.state.session_provider.stop()
    await close_db()


async def kharcha_error_handler(request: Request, exc: KharchaError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, **exc.to_dict()},
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


def create_app(email_service: EmailService = None) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal finance tracking: transactions, subscriptions, loans and insights",
        version=__version__,
        lifespan=lifespan,
    )

    # Shared services live on app.state
    email_service = email_service or EmailService()
    app.state.email_service = email_service
    app.state.auth_service = AuthService(email_service)
    app.state.session_provider = SessionTokenProvider()
    app.state.sign_in_registry = SignInFlowRegistry()

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(KharchaError, kharcha_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Middleware (order matters - last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")
    app.include_router(pages.public_router)
    app.include_router(pages.router)
    app.mount("/static", StaticFiles(directory=str(settings.STATIC_DIR)), name="static")

    return app


app = create_app()
