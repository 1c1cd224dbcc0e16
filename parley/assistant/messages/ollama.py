from __future__ import annotations

from typing import Any, ClassVar

from parley.assistant.messages.base import Message
from parley.utils.images import fetch_base64, is_valid_url


class OllamaMessage(Message):
    ROLES: ClassVar[tuple[str, ...]] = ("system", "assistant", "user", "tool")

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.image_url is not None and not is_valid_url(self.image_url):
            raise ValueError("image_url must be a valid url")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content or ""}
        if self.image_url:
            # Ollama only accepts inline base64 images
            _, encoded = fetch_base64(self.image_url)
            data["images"] = [encoded]
        if self.tool_calls:
            data["tool_calls"] = list(self.tool_calls)
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        return data
