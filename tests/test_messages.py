"""Tests for vendor message models."""

from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from parley.assistant.messages import (
    AnthropicMessage,
    GoogleGeminiMessage,
    MistralAIMessage,
    OllamaMessage,
    OpenAIMessage,
    StandardRole,
)

TOOL_CALL = {"id": "call_1", "type": "function", "function": {"name": "calculator__execute", "arguments": "{}"}}


class TestMessageValidation:
    def test_rejects_unknown_role(self):
        with pytest.raises(ValueError, match="Role must be one of"):
            OpenAIMessage(role="robot", content="beep")

    def test_rejects_non_dict_tool_calls(self):
        with pytest.raises(ValueError, match="Tool calls"):
            OpenAIMessage(role="assistant", tool_calls=["calculator__execute"])

    def test_tool_calls_only_on_llm_messages(self):
        with pytest.raises(ValueError):
            OpenAIMessage(role="user", tool_calls=[TOOL_CALL])

    def test_tool_calls_list_becomes_tuple(self):
        message = OpenAIMessage(role="assistant", tool_calls=[TOOL_CALL])
        assert message.tool_calls == (TOOL_CALL,)

    def test_non_string_content_is_coerced(self):
        assert OpenAIMessage(role="tool", content=4.0, tool_call_id="x").content == "4.0"

    def test_messages_are_immutable(self):
        message = OpenAIMessage(role="user", content="hi")
        with pytest.raises(AttributeError):
            message.content = "changed"

    @pytest.mark.parametrize(
        "message",
        [
            OpenAIMessage(role="user", content="hi"),
            OpenAIMessage(role="assistant", tool_calls=[TOOL_CALL]),
            GoogleGeminiMessage(role="model", content="hi"),
        ],
    )
    def test_messages_are_unhashable(self, message):
        with pytest.raises(TypeError, match="unhashable"):
            hash(message)

    def test_messages_compare_by_value(self):
        assert OpenAIMessage(role="assistant", tool_calls=[TOOL_CALL]) == OpenAIMessage(
            role="assistant", tool_calls=(TOOL_CALL,)
        )


class TestStandardRole:
    @pytest.mark.parametrize(
        "message, expected",
        [
            (OpenAIMessage(role="system", content="x"), StandardRole.SYSTEM),
            (OpenAIMessage(role="assistant", content="x"), StandardRole.LLM),
            (OpenAIMessage(role="user", content="x"), StandardRole.USER),
            (OpenAIMessage(role="tool", content="x"), StandardRole.TOOL),
            (AnthropicMessage(role="tool_result", content="x"), StandardRole.TOOL),
            (GoogleGeminiMessage(role="model", content="x"), StandardRole.LLM),
            (GoogleGeminiMessage(role="function", content="x"), StandardRole.TOOL),
        ],
    )
    def test_maps_vendor_roles(self, message, expected):
        assert message.standard_role is expected

    def test_vendors_without_system_role(self):
        assert not AnthropicMessage(role="user", content="x").is_system
        with pytest.raises(ValueError):
            AnthropicMessage(role="system", content="x")
        with pytest.raises(ValueError):
            GoogleGeminiMessage(role="system", content="x")


class TestOpenAIMessage:
    def test_user_with_image(self):
        message = OpenAIMessage(role="user", content="What is this?", image_url="https://example.com/cat.png")
        assert message.to_dict() == {
            "role": "user",
            "content": [
                {"type": "text", "text": "What is this?"},
                {"type": "image_url", "image_url": {"url": "https://example.com/cat.png"}},
            ],
        }

    def test_assistant_with_tool_calls_has_no_content(self):
        message = OpenAIMessage(role="assistant", tool_calls=[TOOL_CALL])
        assert message.to_dict() == {"role": "assistant", "tool_calls": [TOOL_CALL]}

    def test_tool_result(self):
        message = OpenAIMessage(role="tool", content="4.0", tool_call_id="call_1")
        assert message.to_dict() == {
            "role": "tool",
            "content": [{"type": "text", "text": "4.0"}],
            "tool_call_id": "call_1",
        }


class TestAnthropicMessage:
    def test_assistant_text_then_tool_use(self):
        tool_use = {"type": "tool_use", "id": "toolu_1", "name": "calculator__execute", "input": {}}
        message = AnthropicMessage(role="assistant", content="Let me check", tool_calls=[tool_use])
        assert message.to_dict() == {
            "role": "assistant",
            "content": [{"type": "text", "text": "Let me check"}, tool_use],
        }

    def test_tool_result_is_sent_as_user(self):
        message = AnthropicMessage(role="tool_result", content="4.0", tool_call_id="toolu_1")
        assert message.to_dict() == {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "4.0"}],
        }

    def test_image_url_source(self):
        message = AnthropicMessage(role="user", content="Describe", image_url="https://example.com/a.jpg")
        assert message.to_dict()["content"][1] == {
            "type": "image",
            "source": {"type": "url", "url": "https://example.com/a.jpg"},
        }

    def test_data_url_becomes_base64_source(self):
        message = AnthropicMessage(role="user", image_url="data:image/png;base64,iVBORw0KGgo=")
        assert message.to_dict()["content"] == [
            {
                "type": "image",
                "source": {"type": "base64", "media_type": "image/png", "data": "iVBORw0KGgo="},
            }
        ]


class TestGoogleGeminiMessage:
    def test_text_parts(self):
        assert GoogleGeminiMessage(role="user", content="hi").to_dict() == {
            "role": "user",
            "parts": [{"text": "hi"}],
        }

    def test_function_call_parts(self):
        call = {"functionCall": {"name": "calculator__execute", "args": {"input": "1"}}}
        message = GoogleGeminiMessage(role="model", tool_calls=[call])
        assert message.to_dict() == {"role": "model", "parts": [call]}

    def test_function_response(self):
        message = GoogleGeminiMessage(role="function", content="1.0", tool_call_id="calculator__execute")
        assert message.to_dict() == {
            "role": "function",
            "parts": [
                {
                    "functionResponse": {
                        "name": "calculator__execute",
                        "response": {"name": "calculator__execute", "content": "1.0"},
                    }
                }
            ],
        }

    def test_image_is_dropped_with_warning(self):
        with capture_logs() as logs:
            message = GoogleGeminiMessage(role="user", content="hi", image_url="https://example.com/a.png")

        assert message.image_url is None
        assert logs[0]["event"] == "gemini_image_unsupported"


class TestMistralAIMessage:
    def test_assistant_has_prefix_flag(self):
        message = MistralAIMessage(role="assistant", content="hello")
        assert message.to_dict() == {"role": "assistant", "content": "hello", "tool_calls": [], "prefix": False}

    def test_image_part_is_bare_url(self):
        message = MistralAIMessage(role="user", content="look", image_url="https://example.com/a.png")
        assert message.to_dict()["content"][1] == {"type": "image_url", "image_url": "https://example.com/a.png"}


class TestOllamaMessage:
    def test_rejects_invalid_image_url(self):
        with pytest.raises(ValueError, match="image_url must be a valid url"):
            OllamaMessage(role="user", content="hi", image_url="not a url")

    def test_flat_shape(self):
        call = {"function": {"name": "calculator__execute", "arguments": {"input": "1"}}}
        message = OllamaMessage(role="assistant", tool_calls=[call])
        assert message.to_dict() == {"role": "assistant", "content": "", "tool_calls": [call]}

    def test_data_url_image_is_inlined(self):
        message = OllamaMessage(role="user", content="what", image_url="data:image/jpeg;base64,/9j/4AAQ")
        assert message.to_dict()["images"] == ["/9j/4AAQ"]

    def test_remote_image_is_fetched(self):
        with patch(
            "parley.assistant.messages.ollama.fetch_base64", return_value=("image/png", "QUJD")
        ) as fetch:
            data = OllamaMessage(role="user", content="what", image_url="https://example.com/a.png").to_dict()

        fetch.assert_called_once_with("https://example.com/a.png")
        assert data["images"] == ["QUJD"]
