"""Structured logging for parley, built on structlog.

Library modules only call :func:`get_logger`; nothing is configured on import.
Applications (and the ``parley`` CLI) opt in with :func:`setup_logging`.

Each ``Assistant.run`` binds a ``run_id`` through :func:`run_context`, so the
chat calls and tool executions of one run can be correlated. Events carry
prompts, tool arguments and model output, so every rendered value passes
through :func:`_scrub` (secrets masked, long text truncated) first.
"""

from __future__ import annotations

import logging
import re
import sys
import uuid
from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import IO, Any

import structlog

REDACTED = "***REDACTED***"

# Whole values under these keys are masked, wherever they are nested
_SECRET_KEYS = frozenset(
    {"api_key", "x-api-key", "x-goog-api-key", "authorization", "password", "secret", "token"}
)

_SECRET_ASSIGNMENT = re.compile(
    r"(api_key|x-api-key|key|token|secret|authorization)[\"']?\s*[:=]\s*[\"']?(?:Bearer\s+)?[\w\-\.]+",
    re.IGNORECASE,
)
_PROVIDER_TOKEN = re.compile(r"\bsk-[A-Za-z0-9\-_]{8,}")

MAX_VALUE_CHARS = 2000

# Keys structlog renders itself
_PASSTHROUGH_KEYS = frozenset({"exc_info", "stack_info", "exception", "timestamp", "level", "logger"})

_THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "anthropic", "chromadb", "urllib3")


def _redact(value: str) -> str:
    value = _SECRET_ASSIGNMENT.sub(rf"\1={REDACTED}", value)
    return _PROVIDER_TOKEN.sub(REDACTED, value)


def _truncate(value: str) -> str:
    if len(value) <= MAX_VALUE_CHARS:
        return value
    return f"{value[:MAX_VALUE_CHARS]}...[{len(value) - MAX_VALUE_CHARS} more chars]"


def _scrub(value: Any) -> Any:
    if isinstance(value, str):
        return _truncate(_redact(value))
    if isinstance(value, Mapping):
        return {
            key: REDACTED if str(key).lower() in _SECRET_KEYS else _scrub(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_scrub(item) for item in value]
    return value


def _scrub_event(
    _logger: structlog.types.WrappedLogger,
    _method: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    for key, value in list(event_dict.items()):
        if key in _PASSTHROUGH_KEYS:
            continue
        event_dict[key] = REDACTED if key.lower() in _SECRET_KEYS else _scrub(value)
    return event_dict


def _pre_chain(json_output: bool) -> list[structlog.types.Processor]:
    # Applied to parley events and, through foreign_pre_chain, to stdlib records
    # from httpx, anthropic and chromadb.
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _scrub_event,
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
    return processors


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(level: str = "INFO", json_output: bool = False, stream: IO[str] | None = None) -> None:
    """Send parley's events, and those of its HTTP and vector-store clients, to ``stream``.

    ``stream`` defaults to stderr, which keeps stdout free for streamed model
    output in the CLI. Replaces any handlers already on the root logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    stream = stream if stream is not None else sys.stderr

    if numeric_level <= logging.DEBUG:
        print(
            "WARNING: DEBUG logging is enabled. Prompts, tool arguments and "
            "model output will appear in logs.",
            file=stream,
        )

    pre_chain = _pre_chain(json_output)
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_output)],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def run_context(**bindings: Any) -> AbstractContextManager[Any]:
    """Bind a fresh ``run_id`` (plus ``bindings``) to every event logged inside the block."""
    return structlog.contextvars.bound_contextvars(run_id=uuid.uuid4().hex[:12], **bindings)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
