"""FastAPI application factory. No business logic; only wiring and middleware.

Run with: uvicorn app.main:create_app --factory
"""

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.middleware import SecurityHeadersMiddleware, UnhandledErrorMiddleware
from app.api.v1 import router as v1_router
from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging
from app.core.security import PasswordHasher, TokenService
from app.services.throttle import LoginThrottle


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app. The signing key and hash cost are read once here and injected."""
    if settings is None:
        load_dotenv()
        settings = get_settings()
    configure_logging(settings)

    is_dev = settings.APP_ENV == "dev"
    app = FastAPI(
        title="Secure Users API",
        version="0.1.0",
        docs_url="/docs" if is_dev else None,
        redoc_url="/redoc" if is_dev else None,
        openapi_url="/openapi.json" if is_dev else None,
    )

    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.login_throttle = LoginThrottle(
        max_attempts=settings.LOGIN_RATE_LIMIT_ATTEMPTS,
        window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
    )

    # Last added runs outermost: CORS, then security headers, then the 500 catch-all.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if is_dev else [],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Secure Users API"}

    return app
