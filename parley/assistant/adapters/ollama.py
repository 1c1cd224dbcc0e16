from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from parley.assistant.adapters.openai import OpenAIAdapter
from parley.assistant.messages.base import Message
from parley.assistant.messages.ollama import OllamaMessage
from parley.tools.base import BaseTool
from parley.utils.logging import get_logger

log = get_logger(__name__)


class OllamaAdapter(OpenAIAdapter):
    """Ollama accepts OpenAI-format tools but neither ``tool_choice`` nor a parallel flag.

    Its tool calls have no id and carry arguments as an object.
    """

    message_class = OllamaMessage

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
            if tool_choice != "auto":
                log.warning("tool_choice_unsupported", provider="ollama", tool_choice=tool_choice)
            if not parallel_tool_calls:
                log.warning("parallel_tool_calls_unsupported", provider="ollama")
            params["tools"] = self.build_tools(tools)
        return params
