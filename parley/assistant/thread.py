"""Ordered conversation history."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from parley.assistant.messages.base import Message


class Thread:
    """Messages in insertion order, with at most one system message kept at index 0."""

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = []
        for message in messages:
            self.append(message)

    def append(self, message: Message) -> None:
        if message.is_system:
            self.replace_system_message(message)
        else:
            self._messages.append(message)

    def replace_system_message(self, message: Message | None) -> None:
        """Drop every system message, then put ``message`` (if any) first."""
        self._messages = [m for m in self._messages if not m.is_system]
        if message is not None:
            self._messages.insert(0, message)

    def clear(self) -> None:
        self._messages.clear()

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def to_list(self) -> list[Message]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
