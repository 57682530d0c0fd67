"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from steno.config import Settings
from steno.interface.api.routes import health, invitations, letters
from steno.interface.error import unhandled_exception_handler
from steno.util.di.container import create_container, setup_di
from steno.util.observability import instrument_fastapi


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container; the production container when omitted
    """
    settings = Settings()

    app_instance = FastAPI(
        title="Steno Invitations API",
        description="Debtor invitation, identity verification and account provisioning",
        version="0.1.0",
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.api.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container or create_container())

    app_instance.add_exception_handler(Exception, unhandled_exception_handler)

    app_instance.include_router(health.router)
    app_instance.include_router(invitations.router)
    app_instance.include_router(letters.router)

    return app_instance
