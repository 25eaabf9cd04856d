"""
adapters.cli.main - CLI adapter for the Learn docs copilot.

Connects to the Microsoft Learn MCP server, hands its tools to an Azure
OpenAI backed agent, and either answers one question or runs an
interactive chat.

Commands
--------
  chat      Interactive chat session with slash commands (/help inside)
  ask       One-shot question (defaults to a demo question)
  tools     List the tools exposed by the MCP server
  profile   Show the default user profile kept in memory

Usage
-----
  python run_cli.py chat
  python run_cli.py ask "How do I create an Azure Function in Python?"
  python run_cli.py tools
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

# ── Ensure src/ is on the path when run as a script ──
_SRC = Path(__file__).resolve().parent.parent.parent
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from adapters.cli.presenter import RichPresenter
from agent.memory import MemoryStore
from agent.prompt import DEMO_QUESTION
from application.session import FAREWELL, ChatSession
from domain.exceptions import CopilotError
from domain.ports import NoticeLevel
from factory import ServiceFactory
from infrastructure.config import Settings

__version__ = "1.0.0"

console = Console()
app = typer.Typer(
    help="Microsoft Learn docs copilot CLI",
    add_completion=False,
    no_args_is_help=True,
)

# Set by the global --verbose option
_verbose = False


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every MCP request at INFO
    logging.getLogger("httpx").setLevel(max(logging.getLevelName(level), logging.WARNING))


def _load_settings(*, no_memory: bool = False, require_llm: bool = True) -> Settings:
    """Load settings or exit with a user-friendly error."""
    config = Settings.from_env()
    if no_memory:
        config = dataclasses.replace(config, memory_enabled=False)
    if _verbose:
        config = dataclasses.replace(config, log_level="DEBUG")
    try:
        config.validate(require_llm=require_llm)
    except CopilotError as e:
        _fatal(e)
    _configure_logging(config.log_level)
    return config


def _fatal(error: Exception) -> None:
    """Print a startup error and exit non-zero."""
    console.print(Panel(
        f"[bold red]{escape(str(error))}[/bold red]",
        title="Startup failed",
        border_style="red",
    ))
    raise typer.Exit(code=1)


def _load_memory(presenter: RichPresenter, factory: ServiceFactory) -> Optional[MemoryStore]:
    if not factory.config.memory_enabled:
        presenter.notify(NoticeLevel.INFO, "Memory disabled for this session")
        return None
    presenter.notify(NoticeLevel.INFO, "Initializing Memory Store...")
    memory = factory.create_memory_store()
    presenter.notify(NoticeLevel.SUCCESS, "Memory Store loaded with user profile")
    console.print(
        f"[dim]   Loaded profile: {escape(memory.get('user_name') or '')} "
        f"({escape(memory.get('nickname') or '')})[/dim]"
    )
    return memory


async def _connect(presenter: RichPresenter, factory: ServiceFactory) -> None:
    presenter.notify(NoticeLevel.INFO, "Connecting to Microsoft Learn MCP Server...")
    with console.status("[bold cyan]Loading available tools…", spinner="dots"):
        tools = await factory.initialize()
    presenter.notify(NoticeLevel.SUCCESS, "Connected to Learn MCP")
    presenter.tools(tools)


def _read_line() -> Optional[str]:
    try:
        return Prompt.ask("\n[bold cyan]You[/bold cyan]", console=console)
    except (KeyboardInterrupt, EOFError):
        console.print()
        return None
    except UnicodeDecodeError:
        console.print("[yellow]Could not decode that input as text; please type it again.[/yellow]")
        return ""


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"learn-docs-copilot v{__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def chat(
    no_memory: bool = typer.Option(
        False, "--no-memory",
        help="Start without the user profile memory.",
    ),
) -> None:
    """Start an interactive chat session."""
    config = _load_settings(no_memory=no_memory)
    presenter = RichPresenter(console)

    async def _run() -> None:
        presenter.clear()
        presenter.banner()
        factory = ServiceFactory(config)
        memory = _load_memory(presenter, factory)
        try:
            await _connect(presenter, factory)
            presenter.notify(NoticeLevel.INFO, "Initializing AI Agent...")
            agent = factory.create_agent(memory)
            presenter.notify(NoticeLevel.SUCCESS, "Agent initialized and ready!")

            session = ChatSession(
                agent=agent,
                presenter=presenter,
                writer=factory.create_transcript_writer(),
                memory=memory,
            )
            presenter.notify(NoticeLevel.SUCCESS, "Conversation thread created")
            await session.run(_read_line)
        finally:
            await factory.aclose()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        # asyncio.run turns Ctrl-C into task cancellation, then re-raises it here
        console.print()
        presenter.notify(NoticeLevel.INFO, FAREWELL)
    except CopilotError as e:
        _fatal(e)


@app.command()
def ask(
    question: str = typer.Argument(
        DEMO_QUESTION, help="Your question about Microsoft technologies.",
        show_default=False,
    ),
    no_memory: bool = typer.Option(
        False, "--no-memory",
        help="Answer without the user profile memory.",
    ),
) -> None:
    """Ask a one-shot question (defaults to a demo question)."""
    config = _load_settings(no_memory=no_memory)

    async def _run() -> None:
        async with ServiceFactory(config) as factory:
            memory = factory.create_memory_store()
            console.print(
                f"[green]Connected to Learn MCP "
                f"({len(factory.tool_catalog.names())} tools).[/green]"
            )
            agent = factory.create_agent(memory)
            with console.status("[bold cyan]Thinking…", spinner="dots"):
                result = await agent.run(question, agent.new_thread())

        console.print()
        console.print(Panel(Markdown(result.text), title="Agent Response", border_style="green"))

    try:
        asyncio.run(_run())
    except CopilotError as e:
        _fatal(e)


@app.command()
def tools() -> None:
    """List the tools exposed by the MCP server (no LLM needed)."""
    config = _load_settings(require_llm=False)
    presenter = RichPresenter(console)

    async def _run() -> None:
        async with ServiceFactory(config) as factory:
            presenter.tool_table(factory.tool_catalog.descriptors())

    try:
        asyncio.run(_run())
    except CopilotError as e:
        _fatal(e)


@app.command()
def profile() -> None:
    """Show the default user profile and the memory block sent to the agent."""
    _load_settings(require_llm=False)
    presenter = RichPresenter(console)
    memory = MemoryStore()
    memory.load_default_profile()
    presenter.profile(memory.profile())
    presenter.memory(memory.render_context())


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------

@app.callback()
def _callback(
    version: bool = typer.Option(
        False, "--version", "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-V",
        help="Log at DEBUG level.",
    ),
) -> None:
    """Microsoft Learn docs copilot CLI"""
    global _verbose
    _verbose = verbose


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
