"""Command-line entry point."""

from __future__ import annotations

import click

from parley import __version__
from parley.assistant import Assistant, RunState
from parley.config import Settings, load_settings
from parley.llm import create_provider
from parley.tools import Calculator, FileSystem
from parley.utils.logging import get_logger, setup_logging

log = get_logger(__name__)


@click.group()
@click.version_option(__version__, prog_name="parley")
def cli() -> None:
    """Parley: talk to LLMs that can call tools."""


@cli.command()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option(
    "--provider",
    type=click.Choice(["openai", "anthropic", "mistral_ai", "ollama", "google_gemini"]),
    default=None,
    help="LLM provider (overrides config)",
)
@click.option("--model", default=None, help="Model name (overrides config)")
@click.option("--instructions", default=None, help="System instructions for the assistant")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
def chat(
    config_path: str | None,
    provider: str | None,
    model: str | None,
    instructions: str | None,
    log_level: str | None,
) -> None:
    """Interactive chat with the Calculator and FileSystem tools enabled."""
    settings = load_settings(config_path)
    _apply_overrides(settings, provider, model, instructions, log_level)
    setup_logging(level=settings.log_level, json_output=settings.log_json)

    llm = create_provider(settings.llm)
    assistant = Assistant.from_settings(
        settings,
        tools=[Calculator(), FileSystem()],
        llm=llm,
        stream_callback=lambda chunk: click.echo(chunk, nl=False),
        tool_execution_callback=_echo_tool_call,
    )
    log.info("chat_started", provider=settings.llm.provider, model=settings.llm.model or None)
    click.echo("Type /clear to reset the conversation, /exit to quit.")

    try:
        while True:
            try:
                text = click.prompt("you", prompt_suffix="> ")
            except click.Abort:
                break

            command = text.strip().lower()
            if command == "/exit":
                break
            if command == "/clear":
                assistant.clear_messages()
                assistant.instructions = settings.assistant.instructions
                click.echo("Conversation cleared.")
                continue

            assistant.add_message_and_run_until_complete(text)
            click.echo()
            if assistant.state is RunState.FAILED:
                click.echo("[the assistant run failed, see logs]", err=True)
    finally:
        llm.close()
        log.info("chat_finished", total_tokens=assistant.total_tokens)


def _apply_overrides(
    settings: Settings,
    provider: str | None,
    model: str | None,
    instructions: str | None,
    log_level: str | None,
) -> None:
    if provider:
        settings.llm.provider = provider  # type: ignore[assignment]
    if model:
        settings.llm.model = model
    if instructions:
        settings.assistant.instructions = instructions
    if log_level:
        settings.log_level = log_level


def _echo_tool_call(call_id: str | None, tool_name: str, method_name: str, arguments: dict) -> None:
    click.echo(f"\n[{tool_name}.{method_name}({arguments})]", err=True)


if __name__ == "__main__":
    cli()
