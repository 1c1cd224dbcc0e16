"""Tools an assistant can call."""

from parley.tools.base import BaseTool, ToolResponse, action
from parley.tools.calculator import Calculator
from parley.tools.definition import ActionSchema, ParameterBuilder, ToolSchema
from parley.tools.file_system import FileSystem
from parley.tools.vectorsearch import VectorSearchTool

__all__ = [
    "BaseTool",
    "ToolResponse",
    "action",
    "Calculator",
    "ActionSchema",
    "ParameterBuilder",
    "ToolSchema",
    "FileSystem",
    "VectorSearchTool",
]
