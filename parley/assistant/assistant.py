"""The Assistant: conversation state plus the tool-calling run loop."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from time import monotonic
from typing import TYPE_CHECKING, Any, Callable

from parley.assistant.adapters.base import Adapter
from parley.assistant.adapters.registry import build_adapter
from parley.assistant.dispatcher import ToolDispatcher, ToolExecutionCallback
from parley.assistant.messages.base import Message, StandardRole
from parley.assistant.thread import Thread
from parley.errors import ConfigurationError
from parley.llm.base import LLMProvider
from parley.llm.types import ChatResponse, StreamCallback
from parley.tools.base import BaseTool, ToolResponse
from parley.utils.logging import get_logger, run_context

if TYPE_CHECKING:
    from parley.config import Settings

log = get_logger(__name__)

AddMessageCallback = Callable[[Message], Any]


class RunState(str, Enum):
    READY = "ready"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    COMPLETED = "completed"
    FAILED = "failed"


_FINISHED = (RunState.COMPLETED, RunState.FAILED)


class Assistant:
    """Drives a conversation with an LLM, executing the tools it asks for.

    Usage::

        assistant = Assistant(llm, tools=[Calculator()], instructions="You are a helpful assistant")
        assistant.add_message_and_run_until_complete("What is 2 + 2?")
        assistant.messages[-1].content

    ``run()`` stops at ``requires_action`` so the caller can inspect or
    approve pending tool calls (answering them with
    :meth:`submit_tool_output`). ``run_until_complete()`` executes them
    automatically and keeps going until the model answers in text.
    """

    def __init__(
        self,
        llm: LLMProvider,
        tools: Sequence[BaseTool] = (),
        instructions: str | None = None,
        tool_choice: str = "auto",
        parallel_tool_calls: bool = True,
        messages: Sequence[Message] = (),
        add_message_callback: AddMessageCallback | None = None,
        tool_execution_callback: ToolExecutionCallback | None = None,
        stream_callback: StreamCallback | None = None,
        max_iterations: int | None = None,
        max_run_seconds: float | None = None,
        adapter: Adapter | None = None,
    ) -> None:
        self.llm = llm
        self._adapter = adapter if adapter is not None else build_adapter(llm)

        self.add_message_callback = _validate_callback("add_message_callback", add_message_callback)
        self._tool_execution_callback = _validate_callback(
            "tool_execution_callback", tool_execution_callback
        )
        self.stream_callback = _validate_callback("stream_callback", stream_callback)

        if max_iterations is not None and max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")
        if max_run_seconds is not None and max_run_seconds <= 0:
            raise ConfigurationError("max_run_seconds must be positive")
        self.max_iterations = max_iterations
        self.max_run_seconds = max_run_seconds

        self._thread = Thread()
        self.messages = messages
        self._tools: list[BaseTool] = []
        self._dispatcher = ToolDispatcher([], self._adapter, self._tool_execution_callback)
        self._tool_choice = "auto"
        self.tools = tools
        self.tool_choice = tool_choice
        self.parallel_tool_calls = parallel_tool_calls
        self._instructions: str | None = None
        self.instructions = instructions

        self._state = RunState.READY
        self._total_prompt_tokens = 0
        self._total_completion_tokens = 0
        self._total_tokens = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        tools: Sequence[BaseTool] = (),
        llm: LLMProvider | None = None,
        **kwargs: Any,
    ) -> Assistant:
        from parley.llm import create_provider

        config = settings.assistant
        options: dict[str, Any] = {
            "instructions": config.instructions,
            "tool_choice": config.tool_choice,
            "parallel_tool_calls": config.parallel_tool_calls,
            "max_iterations": config.max_iterations,
            "max_run_seconds": config.max_run_seconds,
        }
        options.update(kwargs)
        return cls(llm if llm is not None else create_provider(settings.llm), tools=tools, **options)

    # -- read-only state --

    @property
    def adapter(self) -> Adapter:
        return self._adapter

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def total_prompt_tokens(self) -> int:
        return self._total_prompt_tokens

    @property
    def total_completion_tokens(self) -> int:
        return self._total_completion_tokens

    @property
    def total_tokens(self) -> int:
        return self._total_tokens

    # -- configuration --

    @property
    def messages(self) -> list[Message]:
        return self._thread.to_list()

    @messages.setter
    def messages(self, messages: Iterable[Message]) -> None:
        messages = list(messages)
        if not all(isinstance(m, Message) for m in messages):
            raise ConfigurationError("messages must only contain Message instances")
        self._thread = Thread(messages)

    @property
    def instructions(self) -> str | None:
        return self._instructions

    @instructions.setter
    def instructions(self, instructions: str | None) -> None:
        self._instructions = instructions
        # Vendors without a system role receive instructions with every chat call
        if self._adapter.support_system_message:
            system = None
            if instructions is not None:
                system = self._build_message(role=self._adapter.system_role, content=instructions)
            self._thread.replace_system_message(system)

    @property
    def tools(self) -> list[BaseTool]:
        return list(self._tools)

    @tools.setter
    def tools(self, tools: Sequence[BaseTool]) -> None:
        tools = list(tools)
        if not all(isinstance(tool, BaseTool) for tool in tools):
            raise ConfigurationError("tools must only contain BaseTool instances")
        dispatcher = ToolDispatcher(tools, self._adapter, self._tool_execution_callback)
        allowed = self._adapter.allowed_tool_choices + self._adapter.available_tool_names(tools)
        if self._tool_choice not in allowed:
            raise ConfigurationError(
                f"Current tool_choice {self._tool_choice!r} is not available with the new tools"
            )
        self._tools = tools
        self._dispatcher = dispatcher

    @property
    def tool_choice(self) -> str:
        return self._tool_choice

    @tool_choice.setter
    def tool_choice(self, tool_choice: str) -> None:
        allowed = self._adapter.allowed_tool_choices + self._adapter.available_tool_names(self._tools)
        if tool_choice not in allowed:
            raise ConfigurationError(f"Tool choice must be one of: {', '.join(allowed)}")
        self._tool_choice = tool_choice

    @property
    def tool_execution_callback(self) -> ToolExecutionCallback | None:
        return self._tool_execution_callback

    @tool_execution_callback.setter
    def tool_execution_callback(self, callback: ToolExecutionCallback | None) -> None:
        self._tool_execution_callback = _validate_callback("tool_execution_callback", callback)
        self._dispatcher.tool_execution_callback = self._tool_execution_callback

    # -- conversation --

    def add_message(
        self,
        content: str | None = None,
        role: str | None = None,
        image_url: str | None = None,
        tool_calls: Sequence[Mapping[str, Any]] = (),
        tool_call_id: str | None = None,
    ) -> list[Message]:
        """Append a message (a user message by default) and reset the state to ``ready``."""
        message = self._build_message(
            role=role or self._adapter.user_role,
            content=content,
            image_url=image_url,
            tool_calls=tool_calls,
            tool_call_id=tool_call_id,
        )

        if self.add_message_callback is not None:
            self.add_message_callback(message)

        self._thread.append(message)
        self._state = RunState.READY
        return self.messages

    def add_messages(self, messages: Iterable[Mapping[str, Any]]) -> list[Message]:
        fields = ("content", "role", "image_url", "tool_calls", "tool_call_id")
        for message in messages:
            self.add_message(**{k: v for k, v in message.items() if k in fields})
        return self.messages

    def submit_tool_output(self, tool_call_id: str | None, output: Any) -> list[Message]:
        response = ToolResponse.wrap(output)
        return self.add_message(
            role=self._adapter.tool_role,
            content=response.content,
            image_url=response.image_url,
            tool_call_id=tool_call_id,
        )

    def clear_messages(self) -> None:
        self._thread.clear()

    def array_of_message_dicts(self) -> list[dict[str, Any]]:
        return [message.to_dict() for message in self._thread]

    # -- run loop --

    def run(self, auto_tool_execution: bool = False) -> list[Message]:
        """Advance the conversation until it completes, fails or needs tool approval."""
        if not len(self._thread):
            log.warning("no_messages_to_process")
            self._state = RunState.COMPLETED
            return []

        self._state = RunState.IN_PROGRESS
        with run_context(llm=type(self.llm).__name__):
            iterations = self._run_loop(auto_tool_execution)
            log.debug("run_stopped", state=self._state.value, iterations=iterations)

        return self.messages

    def _run_loop(self, auto_tool_execution: bool) -> int:
        started = monotonic()
        iterations = 0
        while not self._run_finished(auto_tool_execution):
            if self.max_iterations is not None and iterations >= self.max_iterations:
                log.error("max_iterations_exceeded", max_iterations=self.max_iterations)
                self._state = RunState.FAILED
                break
            if self.max_run_seconds is not None and monotonic() - started > self.max_run_seconds:
                log.error("max_run_seconds_exceeded", max_run_seconds=self.max_run_seconds)
                self._state = RunState.FAILED
                break
            iterations += 1
            self._state = self._handle_state()
        return iterations

    def run_until_complete(self) -> list[Message]:
        return self.run(auto_tool_execution=True)

    def add_message_and_run(
        self,
        content: str | None = None,
        image_url: str | None = None,
        auto_tool_execution: bool = False,
    ) -> list[Message]:
        self.add_message(content=content, image_url=image_url)
        return self.run(auto_tool_execution=auto_tool_execution)

    def add_message_and_run_until_complete(
        self, content: str | None = None, image_url: str | None = None
    ) -> list[Message]:
        return self.add_message_and_run(content=content, image_url=image_url, auto_tool_execution=True)

    def _run_finished(self, auto_tool_execution: bool) -> bool:
        if self._state in _FINISHED:
            return True
        return self._state is RunState.REQUIRES_ACTION and not auto_tool_execution

    def _handle_state(self) -> RunState:
        last = self._thread.last
        if last is None:
            log.error("thread_emptied_during_run", state=self._state.value)
            return RunState.FAILED
        if self._state is RunState.IN_PROGRESS:
            return self._process_latest_message(last)
        if self._state is RunState.REQUIRES_ACTION:
            return self._execute_tools(last)
        log.error("unexpected_run_state", state=self._state.value)
        return RunState.FAILED

    def _process_latest_message(self, last: Message) -> RunState:
        role = last.standard_role

        if role is StandardRole.SYSTEM:
            log.warning("user_message_required_after_system_message")
            return RunState.COMPLETED
        if role is StandardRole.LLM:
            return RunState.REQUIRES_ACTION if last.tool_calls else RunState.COMPLETED
        if role in (StandardRole.USER, StandardRole.TOOL):
            return self._handle_user_or_tool_message()

        log.error("unexpected_message_role", role=last.role)
        return RunState.FAILED

    def _handle_user_or_tool_message(self) -> RunState:
        response = self._chat_with_llm()

        self.add_message(
            role=response.role or self._adapter.message_class.LLM_ROLE,
            content=response.chat_completion,
            tool_calls=response.tool_calls,
        )
        self._record_usage(response)

        if response.tool_calls:
            return RunState.IN_PROGRESS
        if response.chat_completion is not None:
            return RunState.COMPLETED

        log.error("empty_llm_response", model=response.model)
        return RunState.FAILED

    def _execute_tools(self, last: Message) -> RunState:
        try:
            for tool_call in last.tool_calls:
                request, output = self._dispatcher.dispatch(tool_call)
                self.submit_tool_output(tool_call_id=request.id, output=output)
        except Exception:
            log.exception("tool_execution_failed")
            return RunState.FAILED
        return RunState.IN_PROGRESS

    def _chat_with_llm(self) -> ChatResponse:
        log.debug("chat_call", llm=type(self.llm).__name__, messages=len(self._thread))
        params = self._adapter.build_chat_params(
            instructions=self._instructions,
            messages=self._thread.to_list(),
            tools=self._tools,
            tool_choice=self._tool_choice,
            parallel_tool_calls=self.parallel_tool_calls,
        )
        return self.llm.chat(**params, stream_callback=self.stream_callback)

    def _record_usage(self, response: ChatResponse) -> None:
        if response.prompt_tokens is not None:
            self._total_prompt_tokens += response.prompt_tokens
        if response.completion_tokens is not None:
            self._total_completion_tokens += response.completion_tokens
        if response.total_tokens is not None:
            self._total_tokens += response.total_tokens

    def _build_message(self, role: str | None, **fields: Any) -> Message:
        return self._adapter.build_message(role=role, **fields)


def _validate_callback(name: str, callback: Any) -> Any:
    if callback is not None and not callable(callback):
        raise ConfigurationError(f"{name} must be callable")
    return callback
