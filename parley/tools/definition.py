"""Declarative schemas for the actions a tool exposes to an LLM.

A tool is a collection of actions (methods). Each action is described once,
independent of any vendor, and rendered on demand into the OpenAI, Anthropic
or Google Gemini tool dialect.

Parameters are described with a :class:`ParameterBuilder`. Nested object and
array parameters take a ``build`` function that receives a fresh child
builder::

    schema = ToolSchema("inventory")
    schema.define_action(
        "add_item",
        "Adds an item to the inventory",
        lambda p: (
            p.property("name", type="string", description="Item name", required=True),
            p.property("tags", type="array", build=lambda i: i.item(type="string")),
            p.property(
                "dimensions",
                type="object",
                build=lambda d: (
                    d.property("width", type="number"),
                    d.property("height", type="number"),
                ),
            ),
        ),
    )

Every advertised function is named ``"{tool_name}__{method_name}"``; the
assistant adapters split that name to route a tool call back to its method.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from parley.errors import ConfigurationError

VALID_TYPES = ("object", "array", "string", "number", "integer", "boolean")

FUNCTION_NAME_SEPARATOR = "__"

BuildFn = Callable[["ParameterBuilder"], Any]


class ParameterBuilder:
    """Collects JSON-schema properties for one object or array node."""

    def __init__(self, parent_type: str = "object") -> None:
        self._parent_type = parent_type
        self._schema: dict[str, Any] = (
            {"type": "object", "properties": {}, "required": []}
            if parent_type == "object"
            else {}
        )

    def build(self, fn: BuildFn) -> dict[str, Any]:
        fn(self)
        return self._schema

    def property(
        self,
        name: str | None = None,
        *,
        type: str,
        description: str | None = None,
        enum: list[Any] | tuple[Any, ...] | None = None,
        required: bool = False,
        build: BuildFn | None = None,
    ) -> ParameterBuilder:
        """Declare a property; ``name`` is ignored when the parent is an array."""
        self._validate(name, type, enum, required)

        prop: dict[str, Any] = {"type": type}
        if description is not None:
            prop["description"] = description
        if enum is not None:
            prop["enum"] = list(enum)

        if build is not None:
            nested = ParameterBuilder(parent_type=type).build(build)
            if type == "object":
                if not nested["properties"]:
                    raise ConfigurationError(
                        "Object properties must have at least one property defined within it"
                    )
                prop = {**nested, **{k: v for k, v in prop.items() if k != "type"}}
            elif type == "array":
                if not nested:
                    raise ConfigurationError(
                        "Array properties must have at least one item defined within it"
                    )
                prop["items"] = nested
            else:
                raise ConfigurationError(
                    f"Only object and array properties take nested definitions, not '{type}'"
                )

        if self._parent_type == "object":
            self._schema["properties"][name] = prop
            if required:
                self._schema["required"].append(name)
        else:
            self._schema = prop
        return self

    item = property

    def _validate(
        self,
        name: str | None,
        type: str,
        enum: Any,
        required: Any,
    ) -> None:
        if self._parent_type == "object":
            if name is None:
                raise ConfigurationError("Name must be provided for properties of an object")
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Invalid name {name!r}. Name must be a non-empty string")

        if type not in VALID_TYPES:
            raise ConfigurationError(
                f"Invalid type '{type}'. Valid types are: {', '.join(VALID_TYPES)}"
            )

        if enum is not None and not isinstance(enum, (list, tuple)):
            raise ConfigurationError(f"Invalid enum {enum!r}. Enum must be None or a list")

        if not isinstance(required, bool):
            raise ConfigurationError(f"Invalid required {required!r}. Required must be a boolean")


@dataclass(frozen=True)
class ActionSchema:
    tool_name: str
    method_name: str
    description: str
    parameters: dict[str, Any] | None = None

    @property
    def function_name(self) -> str:
        return f"{self.tool_name}{FUNCTION_NAME_SEPARATOR}{self.method_name}"

    def to_openai_format(self) -> dict[str, Any]:
        function: dict[str, Any] = {"name": self.function_name, "description": self.description}
        if self.parameters is not None:
            function["parameters"] = copy.deepcopy(self.parameters)
        return {"type": "function", "function": function}

    def to_anthropic_format(self) -> dict[str, Any]:
        input_schema = copy.deepcopy(self.parameters) if self.parameters is not None else {
            "type": "object",
            "properties": {},
            "required": [],
        }
        return {
            "name": self.function_name,
            "description": self.description,
            "input_schema": input_schema,
        }

    def to_google_gemini_format(self) -> dict[str, Any]:
        return self.to_openai_format()["function"]


class ToolSchema:
    """The ordered set of actions one tool class exposes.

    Actions can be (re)defined until :meth:`freeze` is called; tool classes
    freeze their schema as soon as the class body has been processed.
    """

    def __init__(self, tool_name: str) -> None:
        if not tool_name or FUNCTION_NAME_SEPARATOR in tool_name:
            raise ConfigurationError(
                f"Invalid tool name {tool_name!r}: must be non-empty and free of "
                f"'{FUNCTION_NAME_SEPARATOR}'"
            )
        self.tool_name = tool_name
        self._actions: dict[str, ActionSchema] = {}
        self._frozen = False

    def define_action(
        self,
        method_name: str,
        description: str,
        parameters: BuildFn | None = None,
    ) -> ActionSchema:
        if self._frozen:
            raise ConfigurationError(f"Schema for tool '{self.tool_name}' is frozen")

        schema = None
        if parameters is not None:
            schema = ParameterBuilder(parent_type="object").build(parameters)
            if not schema["properties"]:
                raise ConfigurationError(
                    "Function parameters must have at least one property defined within it, "
                    "if a parameters function is provided"
                )

        action = ActionSchema(
            tool_name=self.tool_name,
            method_name=method_name,
            description=description,
            parameters=schema,
        )
        self._actions[method_name] = action
        return action

    def freeze(self) -> ToolSchema:
        self._frozen = True
        return self

    def get(self, method_name: str) -> ActionSchema | None:
        return self._actions.get(method_name)

    def __iter__(self) -> Iterator[ActionSchema]:
        return iter(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, method_name: object) -> bool:
        return method_name in self._actions

    def function_names(self) -> list[str]:
        return [action.function_name for action in self]

    def to_openai_format(self) -> list[dict[str, Any]]:
        return [action.to_openai_format() for action in self]

    def to_anthropic_format(self) -> list[dict[str, Any]]:
        return [action.to_anthropic_format() for action in self]

    def to_google_gemini_format(self) -> list[dict[str, Any]]:
        return [action.to_google_gemini_format() for action in self]


def split_function_name(function_name: str) -> tuple[str, str]:
    """Split ``"tool__method"`` into ``("tool", "method")``."""
    tool_name, sep, method_name = function_name.partition(FUNCTION_NAME_SEPARATOR)
    if not sep or not tool_name or not method_name:
        raise ValueError(
            f"Function name {function_name!r} is not of the form "
            f"'<tool>{FUNCTION_NAME_SEPARATOR}<method>'"
        )
    return tool_name, method_name
