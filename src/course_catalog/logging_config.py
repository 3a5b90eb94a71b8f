"""Structured logging for the course catalog.

Every event carries whatever the request has bound to the structlog context:
``request_id``, ``method`` and ``path`` from ``RequestLoggingMiddleware``, and
``user_id`` and ``role`` once ``get_current_user`` has authenticated the
caller. Production renders one JSON object per line, other environments a
colored console line.

Credentials never reach the output: password and token fields are masked by
name, and any value that looks like a signed token is masked wherever it
appears.
"""

import logging
import re
import sys

import structlog

REDACTED = "***REDACTED***"

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "password_hash", "secret", "jwt_secret", "token", "authorization"}
)

# header.payload.signature, each part base64url
_TOKEN_PATTERN = re.compile(r"\beyJ[\w-]*\.[\w-]+\.[\w-]+")

# Libraries whose INFO output duplicates ours or leaks query parameters.
QUIET_LOGGERS: tuple[str, ...] = ("uvicorn.access", "passlib", "sqlalchemy.engine")


def _mask(value: object) -> object:
    if isinstance(value, str):
        return _TOKEN_PATTERN.sub(REDACTED, value)
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _mask(v)
            for k, v in value.items()
        }
    return value


def _redact_credentials(
    logger: logging.Logger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Mask sensitive keys, nested ones included, and embedded tokens."""
    for key, value in event_dict.items():
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _mask(value)
    return event_dict


def configure_logging(
    environment: str = "development",
    log_level: str = "INFO",
) -> None:
    """Configure structlog and route stdlib logging through the same renderer.

    Call once at startup (the FastAPI lifespan does).

    Args:
        environment: 'production' for JSON lines, anything else
            for colored console output.
        log_level: Python log level name (DEBUG, INFO, WARNING, etc.).
    """
    production = environment == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact_credentials,
    ]

    renderer: structlog.types.Processor
    if production:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    final_processors: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if production:
        # Tracebacks as structured data instead of a multi-line string.
        final_processors.append(structlog.processors.dict_tracebacks)
    final_processors.append(renderer)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=final_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
