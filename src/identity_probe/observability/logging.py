"""
identity_probe.observability.logging

Structured logging for connection-open and user-store events.

Responsibilities:
- Configure `structlog` (JSON for test/prod runs, console rendering for local dev).
- Tag each event with the layer that emitted it, so connection opens
  (`connection_opening`, with `mode=async|sync`) can be told apart from store
  operations (`user_created`, `user_update_conflict`, ...).
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Logger-name prefix -> layer tag.
_LAYERS = (
    ("identity_probe.db", "connection"),
    ("identity_probe.identity", "store"),
)


def configure_logging(*, service_name: str, level: str, json: bool = True) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer: Any = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            add_layer,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def add_layer(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    name = event_dict.get("logger", "")
    for prefix, layer in _LAYERS:
        if name.startswith(prefix):
            event_dict.setdefault("layer", layer)
            break
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# The scope's database path is bound via contextvars in `identity_probe.container`, so
# every connection-open line names the file it was opened against.
