"""Command-line interface for gen-ai-example."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from gen_ai_example.core.config import Settings, get_settings

if TYPE_CHECKING:
    from typing import Any

DEFAULT_CHAT_MESSAGE = "Hello, please tell me about Python"
DEFAULT_TOOL_MESSAGE = "Check the weather in Beijing, then calculate 10+25"
DEFAULT_OBJECTIVE = "Please check the weather in Beijing, then calculate 10+25"


def _run_async(coro: Any) -> Any:
    """Run an async function synchronously."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        # Already inside a loop (e.g. under pytest-asyncio): run in a worker thread
        import concurrent.futures

        with concurrent.futures.ThreadPoolExecutor() as pool:
            future = pool.submit(asyncio.run, coro)
            return future.result()
    else:
        return asyncio.run(coro)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _settings(ctx: click.Context) -> Settings:
    settings: Settings = ctx.obj["settings"]
    return settings


@click.group()
@click.version_option(package_name="gen-ai-example")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to config file.",
)
@click.option("--http", "use_http", is_flag=True, help="Export spans over OTLP/HTTP.")
@click.pass_context
def main(ctx: click.Context, config: Path | None, use_http: bool) -> None:
    """gen-ai-example: a traced generative-AI task orchestrator.

    Spans go to the console unless --http or OTEL_TRACES_EXPORTER says otherwise.
    """
    from gen_ai_example.observability import setup_logging, setup_tracing, shutdown_tracing

    ctx.ensure_object(dict)
    settings = get_settings(str(config) if config else None)
    if use_http:
        settings = settings.model_copy(
            update={"tracing": settings.tracing.model_copy(update={"exporter": "http"})}
        )
    ctx.obj["settings"] = settings

    if ctx.invoked_subcommand in ("chat", "tool", "agent", "plan"):
        setup_logging(settings.general)
        provider = setup_tracing(settings.tracing)
        if provider is not None and use_http:
            click.echo(f"Exporting spans to {settings.tracing.resolved_endpoint()}", err=True)
        ctx.call_on_close(shutdown_tracing)


@main.command()
@click.argument("message", default=DEFAULT_CHAT_MESSAGE)
@click.option("--user", "user_id", default="user123", help="User id sent with the message.")
def chat(message: str, user_id: str) -> None:
    """Reply to a chat MESSAGE."""
    from gen_ai_example.chat import ChatRequest, ChatService

    service = ChatService()
    response = _run_async(service.process(ChatRequest(message=message, user_id=user_id)))

    click.echo(f"User: {message}")
    click.echo(f"Assistant: {response.reply}")
    click.echo(f"Timestamp: {response.timestamp.isoformat()}")


@main.command()
@click.argument("message", default=DEFAULT_TOOL_MESSAGE)
def tool(message: str) -> None:
    """Let a simulated model pick tools for MESSAGE and run them."""
    from gen_ai_example.core.registry import create_default_registry
    from gen_ai_example.tools.service import ToolService

    service = ToolService(create_default_registry())
    chain = _run_async(service.execute_tool_chain(message))

    click.echo(f"Model: {chain.response.content}")
    for name, result in chain.results.items():
        click.echo(f"{click.style('ok', fg='green')} {name}: {_dump(result)}")
    for name, error in chain.errors.items():
        click.echo(f"{click.style('failed', fg='red')} {name}: {error}")


@main.command()
@click.argument("objective")
@click.pass_context
def plan(ctx: click.Context, objective: str) -> None:
    """Print the task plan for OBJECTIVE as JSON."""
    from gen_ai_example.orchestrator import Agent

    agent = Agent.from_settings(_settings(ctx).agent)
    run = agent.plan(objective)
    click.echo(_dump([task.to_dict() for task in run.tasks]))


@main.command()
@click.argument("objective", default=DEFAULT_OBJECTIVE)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def agent(ctx: click.Context, objective: str, json_output: bool) -> None:
    """Plan OBJECTIVE into tasks and execute them."""
    from gen_ai_example.orchestrator import Agent

    agent_ = Agent.from_settings(_settings(ctx).agent)

    async def execute() -> Any:
        run = await agent_.plan_async(objective)
        if not json_output:
            click.echo(f"Objective: {objective}\n")
            click.echo("1. Planned tasks:")
            for task in run.tasks:
                click.echo(f"  - {task.id}: {task.description}")
            click.echo("\n2. Executing...")
        return await agent_.execute(run)

    result = _run_async(execute())

    if json_output:
        click.echo(_dump(result.to_dict()))
    else:
        click.echo("\n3. Results:")
        for task in result.tasks:
            click.echo(f"\nTask {task['id']} ({task['status']}):")
            if "result" in task:
                click.echo(f"  Result: {_dump(task['result'])}")

    if not result.success:
        raise click.ClickException(result.error or "Task execution failed")


@main.group()
def tools() -> None:
    """Inspect tools."""


@tools.command("list")
def tools_list() -> None:
    """List the built-in tools."""
    from gen_ai_example.core.registry import create_default_registry

    for name, description in create_default_registry().describe().items():
        click.echo(f"{click.style(name, fg='green', bold=True)}")
        click.echo(f"  {description}")


@main.group()
def config() -> None:
    """Inspect configuration."""


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    click.echo(_dump(_settings(ctx).to_dict()))
