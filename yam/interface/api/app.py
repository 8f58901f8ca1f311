"""FastAPI application."""

from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from yam.config import Settings
from yam.interface.api.routes import confirm_signup, health, registration
from yam.util.di.container import create_container, setup_di
from yam.util.observability import instrument_fastapi


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Closes live registration flows first, then the database engine
    await app.state.dishka_container.close()
    logfire.info("Application shut down")


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create the registration API.

    Logfire should be configured before this is called; `start_app.py`
    does so in production.

    Args:
        container: DI container; tests pass one with mocked components
    """
    settings = Settings()

    app_instance = FastAPI(
        title="Yam Registration API",
        description="Redeems invitation links and activates invited accounts",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    # The registration page calls the API from the browser with a bearer token
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=list(dict.fromkeys([settings.site_url, *settings.cors_origins])),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(registration.router)
    app_instance.include_router(confirm_signup.router)

    return app_instance


# Imported by uvicorn
app = create_app()
