"""Structured logging (structlog + stdlib logging).

``configure_logging`` is called once at process start (see
``fulfillment.config.container.bootstrap``).  Library code only ever does
``structlog.get_logger(__name__)``.
"""

from __future__ import annotations

import logging.config
import re
from typing import Any, Optional

import structlog

from fulfillment.config import settings

SENSITIVE_PATTERN = re.compile(
    r"(password|passwd|secret|token|authorization)"
    r"""([=:]\s*["']?)([^\s,}"']+)""",
    re.IGNORECASE,
)

PHONE_PATTERN = re.compile(r"\+?\d[\d\s().-]{6,}\d")

# Phone numbers are only masked under these keys; other digit runs are
# amounts, quantities or ids.
PHONE_KEYS = ("phone", "mobile", "telephone")

MASK = "***MASKED***"


def mask_sensitive_data(_, __, event_dict):
    """Processor that masks phone numbers, passwords and tokens in log values."""
    for key, value in list(event_dict.items()):
        if not isinstance(value, str):
            continue
        value = SENSITIVE_PATTERN.sub(MASK, value)
        if any(name in key.lower() for name in PHONE_KEYS):
            value = PHONE_PATTERN.sub(MASK, value)
        event_dict[key] = value
    return event_dict


# Shared processors used by both structlog and stdlib logging
_shared_processors: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    mask_sensitive_data,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def build_logging_config(level: str, json_logs: bool) -> dict[str, Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
                "foreign_pre_chain": _shared_processors,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    }


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    cache_loggers: bool = True,
) -> None:
    """Configure structlog and the stdlib root logger."""
    level = level or settings.LOG_LEVEL
    json_logs = settings.LOG_JSON if json_logs is None else json_logs

    logging.config.dictConfig(build_logging_config(level, json_logs))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=cache_loggers,
    )
