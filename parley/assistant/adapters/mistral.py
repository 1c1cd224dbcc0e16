from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from parley.assistant.adapters.openai import OpenAIAdapter
from parley.assistant.messages.base import Message
from parley.assistant.messages.mistral import MistralAIMessage
from parley.tools.base import BaseTool


class MistralAIAdapter(OpenAIAdapter):
    """Mistral speaks the OpenAI tool dialect but has no ``parallel_tool_calls``."""

    message_class = MistralAIMessage

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
            params["tools"] = self.build_tools(tools)
            params["tool_choice"] = self.build_tool_choice(tool_choice)
        return params
