"""Logfire tracing and structured log helpers for the engine.

Modules log through `logging.getLogger(__name__)`; records carry their
structured fields in `extra`. Public service operations run inside a
Logfire span named `<service>.<operation>`:

    with span("streak_service.advance_streak"):
        ...

The engine never configures Logfire on import. Hosts call
`configure_logfire()` once at startup.
"""

import logging

import logfire

from momentum.core.config import settings


SERVICE_NAME = "momentum"
SERVICE_VERSION = "0.1.0"

_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


def configure_logfire(*, console: bool = True) -> None:
    """Point Logfire at the configured project; spans stay local without a token."""
    logfire.configure(
        token=settings.logfire_token,
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire="if-token-present",
        console=None if console else False,
    )
    logging.getLogger(__name__).info(
        "Logfire configured", extra={"environment": settings.environment, "export": bool(settings.logfire_token)}
    )


def span(name: str) -> logfire.LogfireSpan:
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Emit `message` at `level` with `context` attached as record attributes.

    Raises:
        ValueError: If level is not a standard logging level name
    """
    name = level.lower()
    if name not in _LEVELS:
        msg = f"Unknown log level: {level}"
        raise ValueError(msg)
    getattr(logger, name)(message, extra=context)


def log_with_user_context(
    logger: logging.Logger,
    level: str,
    message: str,
    user_id: str | None = None,
    **extra: object,
) -> None:
    """Like `log_with_context`, tagging the record with the snapshot owner when known."""
    if user_id:
        extra = {"user_id": user_id, **extra}
    log_with_context(logger, level, message, **extra)
