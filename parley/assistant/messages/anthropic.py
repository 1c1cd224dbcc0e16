from __future__ import annotations

from typing import Any, ClassVar

from parley.assistant.messages.base import Message
from parley.utils.images import parse_data_url


class AnthropicMessage(Message):
    """Anthropic has no system role; instructions travel as the top-level ``system`` field.

    Tool results are sent back as ``user`` turns holding a ``tool_result`` block.
    """

    ROLES: ClassVar[tuple[str, ...]] = ("assistant", "user", "tool_result")
    TOOL_ROLE: ClassVar[str] = "tool_result"
    SYSTEM_ROLE: ClassVar[str | None] = None

    def to_dict(self) -> dict[str, Any]:
        if self.is_llm:
            blocks: list[dict[str, Any]] = []
            if self.content:
                blocks.append({"type": "text", "text": self.content})
            blocks.extend(self.tool_calls)
            return {"role": "assistant", "content": blocks}

        if self.is_tool:
            return {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": self.tool_call_id,
                        "content": self.content or "",
                    }
                ],
            }

        return {"role": "user", "content": self._text_and_image_parts(self._image_block())}

    def _image_block(self) -> dict[str, Any] | None:
        if not self.image_url:
            return None
        inline = parse_data_url(self.image_url)
        if inline is not None:
            media_type, data = inline
            source = {"type": "base64", "media_type": media_type, "data": data}
        else:
            source = {"type": "url", "url": self.image_url}
        return {"type": "image", "source": source}
