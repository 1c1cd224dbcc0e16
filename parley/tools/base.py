"""Base tool interface."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, TypeVar

from parley.tools.definition import BuildFn, ToolSchema

F = TypeVar("F", bound=Callable[..., Any])

_ACTION_ATTR = "__parley_action__"


@dataclass(frozen=True)
class ToolResponse:
    """Standardized tool output: text, an image URL, or both."""

    content: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        if self.content is None and self.image_url is None:
            raise ValueError("Either content or image_url must be provided")

    @classmethod
    def wrap(cls, value: Any) -> ToolResponse:
        if isinstance(value, ToolResponse):
            return value
        if value is None:
            return cls(content="")
        if isinstance(value, str):
            return cls(content=value)
        if isinstance(value, (dict, list, tuple)):
            return cls(content=json.dumps(value, default=str))
        return cls(content=str(value))

    @property
    def has_image(self) -> bool:
        return self.image_url is not None

    def __str__(self) -> str:
        return self.content or ""


def action(description: str, parameters: BuildFn | None = None) -> Callable[[F], F]:
    """Mark a tool method as an action the LLM may call."""

    def decorator(fn: F) -> F:
        setattr(fn, _ACTION_ATTR, (description, parameters))
        return fn

    return decorator


def snake_case(name: str) -> str:
    return re.sub(r"(?<=[A-Z])(?=[A-Z][a-z])|(?<=[a-z\d])(?=[A-Z])", "_", name).lower()


class BaseTool:
    """A capability exposing one or more ``@action`` methods.

    ``tool_name`` defaults to the snake_case class name. The class-level
    ``schema`` is built once, when the subclass is defined.
    """

    tool_name: ClassVar[str] = ""
    schema: ClassVar[ToolSchema]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "tool_name" not in cls.__dict__ or not cls.__dict__["tool_name"]:
            cls.tool_name = snake_case(cls.__name__)

        schema = ToolSchema(cls.tool_name)
        for klass in reversed(cls.__mro__):
            for attr_name, attr in vars(klass).items():
                declared = getattr(attr, _ACTION_ATTR, None)
                if declared is not None:
                    description, parameters = declared
                    schema.define_action(attr_name, description, parameters)
        cls.schema = schema.freeze()

    @staticmethod
    def tool_response(content: Any = None, image_url: str | None = None) -> ToolResponse:
        if content is not None and not isinstance(content, str):
            content = str(content)
        return ToolResponse(content=content, image_url=image_url)
