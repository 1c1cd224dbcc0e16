"""Provider adapters: the seam between the run loop and a vendor's dialect."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, NamedTuple

from parley.assistant.messages.base import Message
from parley.errors import ToolArgumentError
from parley.tools.base import BaseTool
from parley.tools.definition import split_function_name


class ToolCallRequest(NamedTuple):
    id: str | None
    tool_name: str
    method_name: str
    arguments: dict[str, Any]


class Adapter(ABC):
    """Translates between canonical messages/tools and one vendor's wire shapes.

    Subclasses set ``message_class`` and ``allowed_choices``, render the chat
    parameters, and say where a native tool-call payload keeps its id,
    function name and arguments.
    """

    message_class: ClassVar[type[Message]]
    allowed_choices: ClassVar[tuple[str, ...]] = ("auto", "none")

    @abstractmethod
    def build_chat_params(
        self,
        *,
        instructions: str | None,
        messages: Sequence[Message],
        tools: Sequence[BaseTool],
        tool_choice: str,
        parallel_tool_calls: bool,
    ) -> dict[str, Any]:
        """Keyword arguments for ``LLMProvider.chat``."""

    @abstractmethod
    def _unpack_tool_call(self, tool_call: Mapping[str, Any]) -> tuple[str | None, str, Any]:
        """Return ``(call_id, function_name, raw_arguments)``."""

    @abstractmethod
    def build_tools(self, tools: Sequence[BaseTool]) -> list[dict[str, Any]]: ...

    def extract_tool_call_args(self, tool_call: Mapping[str, Any]) -> ToolCallRequest:
        try:
            call_id, function_name, raw_arguments = self._unpack_tool_call(tool_call)
        except (KeyError, TypeError) as e:
            raise ToolArgumentError(f"Malformed tool call payload: {tool_call!r}") from e

        try:
            tool_name, method_name = split_function_name(function_name)
        except (ValueError, TypeError) as e:
            raise ToolArgumentError(f"Cannot route tool call {function_name!r}: {e}") from e

        return ToolCallRequest(
            id=call_id,
            tool_name=tool_name,
            method_name=method_name,
            arguments=decode_arguments(raw_arguments, function_name),
        )

    def build_message(
        self,
        role: str,
        content: str | None = None,
        image_url: str | None = None,
        tool_calls: Sequence[Mapping[str, Any]] = (),
        tool_call_id: str | None = None,
    ) -> Message:
        return self.message_class(
            role=role,
            content=content,
            image_url=image_url,
            tool_calls=tuple(tool_calls),
            tool_call_id=tool_call_id,
        )

    @property
    def support_system_message(self) -> bool:
        return self.message_class.SYSTEM_ROLE is not None

    @property
    def system_role(self) -> str | None:
        return self.message_class.SYSTEM_ROLE

    @property
    def tool_role(self) -> str:
        return self.message_class.TOOL_ROLE

    @property
    def user_role(self) -> str:
        return self.message_class.USER_ROLE

    @property
    def allowed_tool_choices(self) -> list[str]:
        return list(self.allowed_choices)

    def available_tool_names(self, tools: Sequence[BaseTool]) -> list[str]:
        return [name for tool in tools for name in tool.schema.function_names()]

    @staticmethod
    def serialize(messages: Sequence[Message]) -> list[dict[str, Any]]:
        return [message.to_dict() for message in messages]


def decode_arguments(raw: Any, function_name: str = "") -> dict[str, Any]:
    """Turn a vendor's tool-call arguments into a ``{name: value}`` dict.

    Some vendors send a JSON-encoded string, others an object already.
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ToolArgumentError(
                f"Arguments for {function_name!r} are not valid JSON: {e.msg} at position {e.pos}"
            ) from e
    if not isinstance(raw, Mapping):
        raise ToolArgumentError(
            f"Arguments for {function_name!r} must be an object, got {type(raw).__name__}"
        )
    return {str(key): value for key, value in raw.items()}
