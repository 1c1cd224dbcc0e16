from __future__ import annotations

from typing import Any, ClassVar

from parley.assistant.messages.base import Message


class OpenAIMessage(Message):
    ROLES: ClassVar[tuple[str, ...]] = ("system", "assistant", "user", "tool")

    def to_dict(self) -> dict[str, Any]:
        if self.is_llm and self.tool_calls:
            return {"role": self.role, "tool_calls": list(self.tool_calls)}

        data: dict[str, Any] = {"role": self.role, "content": self._content_parts()}
        if self.is_tool:
            data["tool_call_id"] = self.tool_call_id
        return data

    def _content_parts(self) -> list[dict[str, Any]]:
        image = {"type": "image_url", "image_url": {"url": self.image_url}} if self.image_url else None
        return self._text_and_image_parts(image)
