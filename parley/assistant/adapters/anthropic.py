from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from parley.assistant.adapters.base import Adapter
from parley.assistant.messages.anthropic import AnthropicMessage
from parley.assistant.messages.base import Message
from parley.tools.base import BaseTool


class AnthropicAdapter(Adapter):
    message_class = AnthropicMessage
    allowed_choices = ("auto", "any")

    def build_chat_params(
        self,
        *,
        instructions: str | None,
        messages: Sequence[Message],
        tools: Sequence[BaseTool],
        tool_choice: str,
        parallel_tool_calls: bool,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"messages": merge_tool_results(self.serialize(messages))}
        if tools:
            params["tools"] = self.build_tools(tools)
            params["tool_choice"] = self.build_tool_choice(tool_choice, parallel_tool_calls)
        if instructions:
            params["system"] = instructions
        return params

    def build_tools(self, tools: Sequence[BaseTool]) -> list[dict[str, Any]]:
        return [fn for tool in tools for fn in tool.schema.to_anthropic_format()]

    def build_tool_choice(self, choice: str, parallel_tool_calls: bool) -> dict[str, Any]:
        tool_choice: dict[str, Any] = {"disable_parallel_tool_use": not parallel_tool_calls}
        if choice in self.allowed_choices:
            tool_choice["type"] = choice
        else:
            tool_choice["type"] = "tool"
            tool_choice["name"] = choice
        return tool_choice

    def _unpack_tool_call(self, tool_call: Mapping[str, Any]) -> tuple[str | None, str, Any]:
        return tool_call.get("id"), tool_call["name"], tool_call.get("input")


def merge_tool_results(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Fold consecutive ``tool_result`` turns into one ``user`` turn.

    Answers to parallel tool calls must all arrive in the single user turn
    that follows the assistant's ``tool_use`` blocks.
    """
    merged: list[dict[str, Any]] = []
    for message in messages:
        if merged and _is_tool_result(message) and _is_tool_result(merged[-1]):
            merged[-1] = {**merged[-1], "content": merged[-1]["content"] + message["content"]}
        else:
            merged.append(message)
    return merged


def _is_tool_result(message: Mapping[str, Any]) -> bool:
    content = message.get("content")
    return (
        message.get("role") == "user"
        and isinstance(content, list)
        and bool(content)
        and all(block.get("type") == "tool_result" for block in content)
    )
