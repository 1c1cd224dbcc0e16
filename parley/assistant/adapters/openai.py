from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from parley.assistant.adapters.base import Adapter
from parley.assistant.messages.base import Message
from parley.assistant.messages.openai import OpenAIMessage
from parley.tools.base import BaseTool


class OpenAIAdapter(Adapter):
    message_class = OpenAIMessage

    def build_chat_params(
        self,
        *,
        instructions: str | None,
        messages: Sequence[Message],
        tools: Sequence[BaseTool],
        tool_choice: str,
        parallel_tool_calls: bool,
    ) -> dict[str, Any]:
        # instructions already sit in the thread as the system message
        params: dict[str, Any] = {"messages": self.serialize(messages)}
        if tools:
            params["tools"] = self.build_tools(tools)
            params["tool_choice"] = self.build_tool_choice(tool_choice)
            params["parallel_tool_calls"] = parallel_tool_calls
        return params

    def build_tools(self, tools: Sequence[BaseTool]) -> list[dict[str, Any]]:
        return [fn for tool in tools for fn in tool.schema.to_openai_format()]

    def build_tool_choice(self, choice: str) -> str | dict[str, Any]:
        if choice in self.allowed_choices:
            return choice
        return {"type": "function", "function": {"name": choice}}

    def _unpack_tool_call(self, tool_call: Mapping[str, Any]) -> tuple[str | None, str, Any]:
        function = tool_call["function"]
        return tool_call.get("id"), function["name"], function.get("arguments")
