"""Logging and observability configuration using Pydantic Logfire.

This module provides standardized logging utilities and configuration.
All modules should use Python's standard logging library (logging.getLogger(__name__)),
and Logfire will capture and enrich these logs once configured.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Message", family_id="123", user_id="abc")
"""

import logging

import logfire

from src.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment.

    Nothing is sent unless a token is configured, so local runs and tests stay offline.
    Production deployments must configure a token.

    Raises:
        ValueError: If environment is "production" and LOGFIRE_TOKEN is not set
    """
    token = settings.logfire_token
    if settings.environment == "production":
        token = settings.require_credential("logfire_token", "Logfire")

    logfire.configure(
        token=token,
        service_name="household-core",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.getLogger().addHandler(logfire.LogfireLoggingHandler())

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Usage:
        with span("family_access_service.add_member", family_id=family.id):
            # Your service logic here
            pass
    """
    return logfire.span(name, **attributes)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (family_id, user_id, operation_type, etc.)

    Usage:
        log_with_context(logger, "info", "Member added", user_id="123", operation_type="add")
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)


def log_with_family_context(
    logger: logging.Logger,
    level: str,
    message: str,
    family_id: str | None = None,
    **extra: object,
) -> None:
    """Log a message with family context.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        family_id: Family ID to include in context
        **extra: Additional context fields
    """
    context = {"family_id": family_id, **extra} if family_id else extra
    log_with_context(logger, level, message, **context)
