from __future__ import annotations

from typing import Any, ClassVar

from parley.assistant.messages.base import Message
from parley.utils.logging import get_logger

log = get_logger(__name__)


class GoogleGeminiMessage(Message):
    """Gemini turns are ``parts`` lists; there is no system role.

    Gemini function calls carry no id, so ``tool_call_id`` holds the
    function name the result answers.
    """

    ROLES: ClassVar[tuple[str, ...]] = ("user", "model", "function")
    LLM_ROLE: ClassVar[str] = "model"
    TOOL_ROLE: ClassVar[str] = "function"
    SYSTEM_ROLE: ClassVar[str | None] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.image_url:
            log.warning("gemini_image_unsupported", image_url=self.image_url)
            object.__setattr__(self, "image_url", None)

    def to_dict(self) -> dict[str, Any]:
        if self.is_tool:
            parts: list[dict[str, Any]] = [
                {
                    "functionResponse": {
                        "name": self.tool_call_id,
                        "response": {"name": self.tool_call_id, "content": self.content or ""},
                    }
                }
            ]
        elif self.tool_calls:
            parts = list(self.tool_calls)
        else:
            parts = [{"text": self.content or ""}]
        return {"role": self.role, "parts": parts}
