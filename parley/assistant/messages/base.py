"""Canonical conversation message."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar


class StandardRole(str, Enum):
    SYSTEM = "system"
    LLM = "llm"
    USER = "user"
    TOOL = "tool"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Message(ABC):
    """One turn of a conversation, in a vendor's role vocabulary.

    Subclasses name their vendor's roles through the class constants below and
    render the wire format in :meth:`to_dict`. ``tool_calls`` keeps the
    vendor-native payloads the model produced, so messages compare by value
    but are not hashable.
    """

    ROLES: ClassVar[tuple[str, ...]] = ()
    USER_ROLE: ClassVar[str] = "user"
    LLM_ROLE: ClassVar[str] = "assistant"
    TOOL_ROLE: ClassVar[str] = "tool"
    SYSTEM_ROLE: ClassVar[str | None] = "system"

    __hash__ = None  # type: ignore[assignment]

    role: str
    content: str | None = None
    image_url: str | None = None
    tool_calls: tuple[dict[str, Any], ...] = ()
    tool_call_id: str | None = None

    def __post_init__(self) -> None:
        if self.role not in self.ROLES:
            raise ValueError(f"Role must be one of {', '.join(self.ROLES)}")

        tool_calls = self.tool_calls if self.tool_calls is not None else ()
        if not isinstance(tool_calls, (list, tuple)) or not all(
            isinstance(tc, Mapping) for tc in tool_calls
        ):
            raise ValueError("Tool calls must be a list of dicts")
        object.__setattr__(self, "tool_calls", tuple(tool_calls))

        if tool_calls and self.standard_role is not StandardRole.LLM:
            raise ValueError(f"Only {self.LLM_ROLE!r} messages may carry tool calls")

        # Some tools return numbers or structured values
        if self.content is not None and not isinstance(self.content, str):
            object.__setattr__(self, "content", str(self.content))

    @property
    def is_user(self) -> bool:
        return self.role == self.USER_ROLE

    @property
    def is_llm(self) -> bool:
        return self.role == self.LLM_ROLE

    @property
    def is_tool(self) -> bool:
        return self.role == self.TOOL_ROLE

    @property
    def is_system(self) -> bool:
        return self.SYSTEM_ROLE is not None and self.role == self.SYSTEM_ROLE

    @property
    def standard_role(self) -> StandardRole:
        if self.is_user:
            return StandardRole.USER
        if self.is_llm:
            return StandardRole.LLM
        if self.is_tool:
            return StandardRole.TOOL
        if self.is_system:
            return StandardRole.SYSTEM
        return StandardRole.UNKNOWN

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Render the message in the vendor's wire format."""

    def _text_and_image_parts(self, image_part: dict[str, Any] | None) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = []
        if self.content:
            parts.append({"type": "text", "text": self.content})
        if image_part is not None:
            parts.append(image_part)
        return parts
