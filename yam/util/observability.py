"""Observability configuration using Logfire.

Registration components log through logfire directly:

    with logfire.span("invitation_validator.validate", token=token.masked):
        ...

Invitation tokens are logged by prefix only (`InvitationToken.masked`).
Access tokens and passwords are never passed to logfire; the scrubbing
patterns below are a backstop for request attributes captured by the
instrumentations.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from yam.config import Settings

SCRUB_PATTERNS = ["access_token", "refresh_token", "apikey", "anon_key"]


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire.

    Sending to Logfire follows OBSERVABILITY__SEND_TO_LOGFIRE when set,
    otherwise it is on exactly when a token is configured.

    Args:
        settings: Application settings
    """
    observability = settings.observability
    send_to_logfire = observability.send_to_logfire
    if send_to_logfire is None:
        send_to_logfire = bool(observability.logfire_token)

    logfire.configure(
        service_name="yam-registration",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUB_PATTERNS),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        session_wait_seconds=settings.registration.session_wait_seconds,
        prefetch_invitation=settings.registration.prefetch_invitation,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace API requests, except health probes."""
    logfire.instrument_fastapi(app, capture_headers=False, excluded_urls="/health")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace queries against the invitation and profile tables.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )


def instrument_httpx() -> None:
    """Trace calls to Supabase Auth."""
    logfire.instrument_httpx()
