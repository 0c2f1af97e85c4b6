"""Logging configuration with structlog integration.

Two logging channels:
1. loguru: diagnostic logs
2. structlog: structured logs for key business events
"""

import sys
from typing import Any

import structlog
from loguru import logger

from keydash.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """Configure the structlog processor chain."""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """Configure loguru sinks."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/keydash_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# Business event logging
# ============================================================================


def mask_key(key_value: str) -> str:
    """Keep only the first characters of a key for logs."""
    return key_value[:7] + "*" * max(0, min(len(key_value) - 7, 8))


class BusinessEvents:
    """Helpers for structured business events.

    Usage:
        from keydash.core.infrastructure.logging import BusinessEvents

        BusinessEvents.api_key_created(user_id="u-1", key_id="k-1", key_value="stan...")
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def api_key_created(
        cls,
        user_id: str,
        key_id: str,
        key_value: str,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "api_key_created",
            event_type="api_key",
            user_id=user_id,
            key_id=key_id,
            key=mask_key(key_value),
            **extra,
        )

    @classmethod
    def api_key_updated(
        cls,
        user_id: str,
        key_id: str,
        value_changed: bool,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "api_key_updated",
            event_type="api_key",
            user_id=user_id,
            key_id=key_id,
            value_changed=value_changed,
            **extra,
        )

    @classmethod
    def api_key_deleted(cls, user_id: str, key_id: str, **extra: Any) -> None:
        cls._log.info(
            "api_key_deleted",
            event_type="api_key",
            user_id=user_id,
            key_id=key_id,
            **extra,
        )

    @classmethod
    def api_key_validated(
        cls,
        user_id: str,
        key_id: str,
        usage_count: int,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "api_key_validated",
            event_type="api_key_auth",
            user_id=user_id,
            key_id=key_id,
            usage_count=usage_count,
            **extra,
        )

    @classmethod
    def api_key_rejected(
        cls,
        key_value: str,
        reason: str,
        user_id: str | None = None,
        **extra: Any,
    ) -> None:
        """Record a key that failed validation."""
        cls._log.warning(
            "api_key_rejected",
            event_type="api_key_auth",
            key=mask_key(key_value),
            reason=reason,
            user_id=user_id,
            **extra,
        )

    @classmethod
    def api_key_usage_recorded(
        cls,
        key_value: str,
        usage_count: int | None,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "api_key_usage_recorded",
            event_type="api_key_usage",
            key=mask_key(key_value),
            usage_count=usage_count,
            **extra,
        )

    @classmethod
    def repository_summarized(
        cls,
        user_id: str,
        owner: str,
        repo: str,
        readme_chars: int,
        fact_count: int,
        latency_ms: int,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "repository_summarized",
            event_type="summarize",
            user_id=user_id,
            owner=owner,
            repo=repo,
            readme_chars=readme_chars,
            fact_count=fact_count,
            latency_ms=latency_ms,
            **extra,
        )

    @classmethod
    def user_login_tracked(cls, email: str, first_login: bool, **extra: Any) -> None:
        cls._log.info(
            "user_login_tracked",
            event_type="login",
            email=email,
            first_login=first_login,
            **extra,
        )

    @classmethod
    def feature_degraded(
        cls,
        feature: str,
        reason: str,
        **extra: Any,
    ) -> None:
        cls._log.warning(
            "feature_degraded",
            event_type="degradation",
            feature=feature,
            reason=reason,
            **extra,
        )
