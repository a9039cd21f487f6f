"""structlog setup for the deployer.

Events are rendered as JSON lines on stderr so that `flink run` output printed
by the CLI stays alone on stdout. Every event carries the service name, the
deployment environment and the targeted job manager. Bearer tokens bound to a
logger or passed as event fields are masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Final

import structlog

_REDACTED_FIELDS: Final[frozenset[str]] = frozenset({"api_token", "authorization"})


def configure_logging(
    *,
    service_name: str,
    level: str,
    environment_name: str = "development",
    jobmanager_address: str | None = None,
) -> None:
    """Configure JSON event logging for CLI and HTTP runs.

    Args:
        service_name: Service label stamped on every event.
        level: Root log level name.
        environment_name: Deployment environment label.
        jobmanager_address: Flink job manager targeted by this process, if configured.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _bind_deployer_context(
                service=service_name,
                environment=environment_name,
                jobmanager=jobmanager_address or "default",
            ),
            _redact_secrets,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _bind_deployer_context(**static_fields: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for field_name, field_value in static_fields.items():
            event_dict.setdefault(field_name, field_value)
        return event_dict

    return processor


def _redact_secrets(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for field_name in _REDACTED_FIELDS.intersection(event_dict):
        if event_dict[field_name]:
            event_dict[field_name] = "***"
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
