"""Exception hierarchy shared across the library."""

from __future__ import annotations

from typing import Any


class ParleyError(Exception):
    """Base class for every error raised by Parley."""


class ConfigurationError(ParleyError, ValueError):
    """Invalid setup: bad tool_choice, tools, messages, callbacks or schemas."""


class ToolNotFoundError(ParleyError, LookupError):
    """A tool call named a tool or action that is not registered."""


class ToolArgumentError(ParleyError, ValueError):
    """A tool call payload could not be decoded."""


class ApiError(ParleyError):
    """The vendor response body signalled an error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
