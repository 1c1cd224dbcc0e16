"""Tests for the tool dispatcher."""

from unittest.mock import MagicMock

import pytest

from helpers import Weather, openai_tool_call
from parley.assistant.adapters import OpenAIAdapter
from parley.assistant.dispatcher import ToolDispatcher
from parley.errors import ConfigurationError, ToolArgumentError, ToolNotFoundError
from parley.tools import Calculator, ToolResponse
from parley.tools.base import BaseTool, action


@pytest.fixture
def dispatcher():
    return ToolDispatcher([Calculator(), Weather()], OpenAIAdapter())


class TestToolDispatcher:
    def test_dispatch_returns_request_and_response(self, dispatcher):
        request, response = dispatcher.dispatch(
            openai_tool_call("call_1", "weather__current", {"city": "Rome", "unit": "fahrenheit"})
        )
        assert request.id == "call_1"
        assert response == ToolResponse(content="Sunny in Rome, 21 fahrenheit")

    def test_structured_results_are_json(self, dispatcher):
        _, response = dispatcher.dispatch(openai_tool_call("c", "weather__forecast", {"days": 3}))
        assert response.content == '{"days": 3, "outlook": "rain"}'

    def test_table_covers_every_action(self, dispatcher):
        assert ("calculator", "execute") in dispatcher
        assert ("weather", "forecast") in dispatcher
        assert ("weather", "missing") not in dispatcher

    def test_unknown_tool(self, dispatcher):
        with pytest.raises(ToolNotFoundError):
            dispatcher.dispatch(openai_tool_call("c", "search__query", {}))

    def test_unknown_method(self, dispatcher):
        with pytest.raises(ToolNotFoundError):
            dispatcher.dispatch(openai_tool_call("c", "weather__history", {}))

    def test_bad_arguments(self, dispatcher):
        call = openai_tool_call("c", "weather__current", {})
        call["function"]["arguments"] = "nope"
        with pytest.raises(ToolArgumentError):
            dispatcher.dispatch(call)

    def test_callback_fires_before_execution(self):
        order = []
        tool = Weather()
        tool.current = MagicMock(side_effect=lambda **kw: order.append("execute") or "ok")
        callback = MagicMock(side_effect=lambda *args: order.append("callback"))
        dispatcher = ToolDispatcher([tool], OpenAIAdapter(), tool_execution_callback=callback)

        dispatcher.dispatch(openai_tool_call("c", "weather__current", {"city": "Oslo"}))

        callback.assert_called_once_with("c", "weather", "current", {"city": "Oslo"})
        assert order == ["callback", "execute"]

    def test_callback_not_fired_for_unknown_tool(self):
        callback = MagicMock()
        dispatcher = ToolDispatcher([Calculator()], OpenAIAdapter(), tool_execution_callback=callback)

        with pytest.raises(ToolNotFoundError):
            dispatcher.dispatch(openai_tool_call("c", "weather__current", {}))

        callback.assert_not_called()

    def test_declared_action_without_method(self):
        class Broken(BaseTool):
            @action("Does things")
            def run(self):
                return "ran"

        tool = Broken()
        tool.run = None

        with pytest.raises(ConfigurationError, match="no such method"):
            ToolDispatcher([tool], OpenAIAdapter())
