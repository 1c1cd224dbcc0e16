"""Routes decoded tool calls to tool methods."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Callable

from parley.assistant.adapters.base import Adapter, ToolCallRequest
from parley.errors import ConfigurationError, ToolNotFoundError
from parley.tools.base import BaseTool, ToolResponse
from parley.utils.logging import get_logger

log = get_logger(__name__)

ToolExecutionCallback = Callable[[str | None, str, str, dict[str, Any]], Any]


class ToolDispatcher:
    """Explicit ``(tool_name, method_name) -> bound method`` table.

    Built once per tool set, so an action declared without a matching method
    fails at construction rather than mid-conversation.
    """

    def __init__(
        self,
        tools: Sequence[BaseTool],
        adapter: Adapter,
        tool_execution_callback: ToolExecutionCallback | None = None,
    ) -> None:
        self._adapter = adapter
        self.tool_execution_callback = tool_execution_callback
        self._table: dict[tuple[str, str], Callable[..., Any]] = {}

        for tool in tools:
            for action in tool.schema:
                method = getattr(tool, action.method_name, None)
                if not callable(method):
                    raise ConfigurationError(
                        f"Tool '{tool.tool_name}' declares action '{action.method_name}' "
                        "but has no such method"
                    )
                self._table[(tool.tool_name, action.method_name)] = method

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def dispatch(self, tool_call: Mapping[str, Any]) -> tuple[ToolCallRequest, ToolResponse]:
        """Execute one vendor-native tool call.

        Raises ``ToolArgumentError`` when the payload cannot be decoded and
        ``ToolNotFoundError`` when it names no registered action. Exceptions
        raised by the tool itself propagate unchanged.
        """
        request = self._adapter.extract_tool_call_args(tool_call)

        method = self._table.get((request.tool_name, request.method_name))
        if method is None:
            raise ToolNotFoundError(
                f"No tool action '{request.tool_name}__{request.method_name}' is registered"
            )

        self._notify(request)

        log.info(
            "tool_executing",
            tool=request.tool_name,
            method=request.method_name,
            call_id=request.id,
            args=request.arguments,
        )
        output = method(**request.arguments)
        return request, ToolResponse.wrap(output)

    def _notify(self, request: ToolCallRequest) -> None:
        if self.tool_execution_callback is None:
            return
        try:
            self.tool_execution_callback(
                request.id, request.tool_name, request.method_name, request.arguments
            )
        except Exception:
            log.exception("tool_execution_callback_error", tool=request.tool_name)
