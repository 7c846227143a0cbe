"""structlog setup shared by the API, the services and the generative client."""

import contextvars
import logging.config
import os

import structlog

# Request ID for the current task; bound into every log line
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)

# Libraries that are noisy at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "aiosqlite", "multipart")


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def configure_logging(level: str | None = None, environment: str | None = None) -> None:
    """Configure structlog and route stdlib logging through the same renderer.

    Development gets console output; every other environment writes one JSON
    object per line. LOG_LEVEL and ENVIRONMENT are read when not passed.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    environment = (environment or os.getenv("ENVIRONMENT", "development")).lower()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if environment == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                    "foreign_pre_chain": shared_processors,
                },
            },
            "handlers": {
                "default": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {"handlers": ["default"], "level": level, "propagate": True},
                **{name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            },
        }
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
