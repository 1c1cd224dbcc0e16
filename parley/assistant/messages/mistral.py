from __future__ import annotations

from typing import Any, ClassVar

from parley.assistant.messages.base import Message


class MistralAIMessage(Message):
    ROLES: ClassVar[tuple[str, ...]] = ("system", "assistant", "user", "tool")

    def to_dict(self) -> dict[str, Any]:
        if self.is_llm:
            return {
                "role": self.role,
                "content": self.content or "",
                "tool_calls": list(self.tool_calls),
                "prefix": False,
            }
        if self.is_tool:
            return {"role": self.role, "content": self.content or "", "tool_call_id": self.tool_call_id}

        image = {"type": "image_url", "image_url": self.image_url} if self.image_url else None
        return {"role": self.role, "content": self._text_and_image_parts(image)}
