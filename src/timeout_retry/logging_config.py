"""
structlog setup for applications using the retry layer.

While a replayed attempt is in flight, the response-error interceptor
binds the chain's retry attempt, method and URL to structlog's
contextvars through retry_context(). Every event logged during that
attempt carries them: events from this package, from user event hooks,
and httpx's own "HTTP Request" lines routed through the stdlib bridge.
group_retry_context() folds those keys into a single ``retry`` mapping:

    {"event": "HTTP Request: GET ... 200 OK",
     "retry": {"attempt": 2, "method": "GET", "url": "..."}}
"""

import logging
import sys
from contextlib import AbstractContextManager

import httpx
import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from timeout_retry.config import Settings

RETRY_CONTEXT_KEYS = ("retry_attempt", "retry_method", "retry_url")


def retry_context(request: httpx.Request, attempt: int) -> AbstractContextManager[None]:
    """Bind a replayed attempt's identity to structlog's contextvars."""
    return structlog.contextvars.bound_contextvars(
        retry_attempt=attempt,
        retry_method=request.method,
        retry_url=str(request.url),
    )


def group_retry_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Move bound retry_* context keys under a single ``retry`` key."""
    retry = {
        key.removeprefix("retry_"): event_dict.pop(key)
        for key in RETRY_CONTEXT_KEYS
        if key in event_dict
    }
    if retry:
        event_dict["retry"] = retry
    return event_dict


def app_context(app_name: str) -> Processor:
    """Processor tagging every event with the application name."""

    def _add_app(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        return event_dict

    return _add_app


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    app_name: str = "httpx-timeout-retry",
) -> None:
    """
    Route structlog and stdlib logging through one renderer.

    Args:
        log_level: Root level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: "production" renders JSON lines with exception info,
            anything else renders colored console output
        app_name: Value of the ``app`` key on every event

    httpx keeps the root level so each attempt's request line is logged
    with its retry context; httpcore connection chatter is raised to
    WARNING.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    json_output = environment.lower() == "production"

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        group_retry_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(app_name),
    ]
    if json_output:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

    logging.getLogger("httpcore").setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if json_output else "console",
    )


def configure_logging_from_settings(settings: Settings) -> None:
    """Configure logging from LOG_LEVEL, ENVIRONMENT and APP_NAME."""
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT, app_name=settings.APP_NAME)
