"""Payload builders and fake tools shared by the tests."""

import json

from parley.llm.types import ChatResponse
from parley.tools.base import BaseTool, action


def openai_tool_call(call_id: str, function_name: str, arguments: dict) -> dict:
    return {
        "id": call_id,
        "type": "function",
        "function": {"name": function_name, "arguments": json.dumps(arguments)},
    }


def tool_call_response(*tool_calls: dict, role: str = "assistant") -> ChatResponse:
    return ChatResponse(
        role=role,
        tool_calls=list(tool_calls),
        prompt_tokens=10,
        completion_tokens=5,
        total_tokens=15,
    )


def text_response(text: str, role: str = "assistant") -> ChatResponse:
    return ChatResponse(
        role=role,
        chat_completion=text,
        prompt_tokens=20,
        completion_tokens=7,
        total_tokens=27,
    )


class Weather(BaseTool):
    """Test tool with two actions."""

    @action(
        "Current weather for a city",
        lambda p: (
            p.property("city", type="string", required=True),
            p.property("unit", type="string", enum=["celsius", "fahrenheit"]),
        ),
    )
    def current(self, city: str, unit: str = "celsius") -> str:
        return f"Sunny in {city}, 21 {unit}"

    @action("Weather forecast", lambda p: p.property("days", type="integer", required=True))
    def forecast(self, days: int) -> dict:
        return {"days": days, "outlook": "rain"}
