from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from parley.assistant.adapters.base import Adapter
from parley.assistant.messages.base import Message
from parley.assistant.messages.gemini import GoogleGeminiMessage
from parley.tools.base import BaseTool
from parley.utils.logging import get_logger

log = get_logger(__name__)


class GoogleGeminiAdapter(Adapter):
    """Gemini function calls have no id; the function name stands in for one.

    Two calls to the same function in one turn are answered in request order
    but share that id.
    """

    message_class = GoogleGeminiMessage

    def build_chat_params(
        self,
        *,
        instructions: str | None,
        messages: Sequence[Message],
        tools: Sequence[BaseTool],
        tool_choice: str,
        parallel_tool_calls: bool,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"messages": self.serialize(messages)}
        if tools:
            if not parallel_tool_calls:
                log.warning("parallel_tool_calls_unsupported", provider="google_gemini")
            params["tools"] = self.build_tools(tools)
            params["tool_choice"] = self.build_tool_config(tool_choice)
        if instructions:
            params["system"] = instructions
        return params

    def build_tools(self, tools: Sequence[BaseTool]) -> list[dict[str, Any]]:
        return [fn for tool in tools for fn in tool.schema.to_google_gemini_format()]

    def build_tool_config(self, choice: str) -> dict[str, Any]:
        if choice in self.allowed_choices:
            return {"function_calling_config": {"mode": choice.upper()}}
        return {"function_calling_config": {"mode": "ANY", "allowed_function_names": [choice]}}

    def _unpack_tool_call(self, tool_call: Mapping[str, Any]) -> tuple[str | None, str, Any]:
        function_call = tool_call["functionCall"]
        name = function_call["name"]
        return name, name, function_call.get("args")
