"""Conversation state and the tool-calling run loop."""

from parley.assistant.assistant import Assistant, RunState
from parley.assistant.adapters import Adapter, ToolCallRequest, build_adapter, register_adapter
from parley.assistant.dispatcher import ToolDispatcher
from parley.assistant.messages import Message, StandardRole
from parley.assistant.thread import Thread

__all__ = [
    "Assistant",
    "RunState",
    "Adapter",
    "ToolCallRequest",
    "build_adapter",
    "register_adapter",
    "ToolDispatcher",
    "Message",
    "StandardRole",
    "Thread",
]
