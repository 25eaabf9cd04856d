"""
adapters.cli.presenter - rich-based console output for the chat session.

Implements domain.ports.Presenter. All colour and layout decisions live
here so the session loop stays testable without a terminal.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from application.session import preview
from domain.models import Role, ToolDescriptor, Turn
from domain.ports import NoticeLevel

TOOL_PREVIEW_COUNT = 5

_LEVEL_STYLES = {
    NoticeLevel.INFO: "blue",
    NoticeLevel.SUCCESS: "green",
    NoticeLevel.WARNING: "yellow",
    NoticeLevel.ERROR: "bold red",
}


class RichPresenter:
    """Console presenter backed by a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def notify(self, level: NoticeLevel, text: str) -> None:
        self.console.print(Text(text, style=_LEVEL_STYLES[level]))

    def banner(self) -> None:
        self.console.print(Panel(
            "[bold]Agent Framework Copilot[/bold]\n"
            "Powered by Microsoft Learn MCP & Azure OpenAI",
            border_style="magenta",
            box=box.DOUBLE,
        ))
        self.console.print(
            "[dim]Ask me anything about Microsoft technologies!\n"
            "Type [bold]/help[/bold] for commands or [bold]/exit[/bold] to quit[/dim]\n"
        )

    def clear(self) -> None:
        self.console.clear()

    def thinking(self) -> AbstractContextManager[object]:
        return self.console.status("[bold cyan]Agent is thinking…", spinner="dots")

    def agent_reply(self, text: str, elapsed_ms: int, message_count: int) -> None:
        self.console.print()
        self.console.print(Panel(Markdown(text), title="Agent", border_style="green"))
        self.console.print(
            f"[dim]Response time: {elapsed_ms}ms | Messages: {message_count}[/dim]"
        )

    def history(self, turns: Sequence[Turn]) -> None:
        self.console.print("\n[bold]Conversation History:[/bold]")
        self.console.print(Rule(style="dim"))
        for i, turn in enumerate(turns, start=1):
            is_user = turn.role is Role.USER
            label = "You" if is_user else "Agent"
            style = "cyan" if is_user else "green"
            self.console.print(f"\n[{style}][{i}] {label}:[/{style}]")
            self.console.print(Text(preview(turn.text)))
        self.console.print(Rule(style="dim"))

    def help(self, entries: Sequence[tuple[str, str]]) -> None:
        t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        t.add_column("Command", style="bold yellow")
        t.add_column("Description")
        for usage, description in entries:
            t.add_row(usage, description)
        self.console.print(Panel(t, title="Available Commands", border_style="yellow"))

    def memory(self, block: str) -> None:
        self.console.print(Panel(
            Text(block.rstrip("\n"), style="cyan"),
            title="Memory Store Contents",
            border_style="cyan",
        ))

    def profile(self, rows: Sequence[tuple[str, Optional[str]]]) -> None:
        t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        t.add_column("Field", style="bold")
        t.add_column("Value", style="magenta")
        for label, value in rows:
            t.add_row(label, escape(value) if value else "[dim]—[/dim]")
        self.console.print(Panel(t, title="User Profile", border_style="magenta"))

    def tools(self, descriptors: Sequence[ToolDescriptor]) -> None:
        self.console.print(
            f"[green]Loaded {len(descriptors)} tools from Microsoft Learn[/green]"
        )
        for descriptor in descriptors[:TOOL_PREVIEW_COUNT]:
            self.console.print(f"[dim]   • {escape(descriptor.name)}[/dim]")
        if len(descriptors) > TOOL_PREVIEW_COUNT:
            self.console.print(
                f"[dim]   ... and {len(descriptors) - TOOL_PREVIEW_COUNT} more[/dim]"
            )

    def tool_table(self, descriptors: Sequence[ToolDescriptor]) -> None:
        """Full listing used by the `tools` command."""
        t = Table(box=box.SIMPLE_HEAD, padding=(0, 2))
        t.add_column("Tool", style="bold")
        t.add_column("Description")
        t.add_column("Arguments", style="dim")
        for descriptor in descriptors:
            args = ", ".join(descriptor.input_schema.get("properties", {}).keys())
            t.add_row(
                Text(descriptor.name), Text(descriptor.description), Text(args or "—"),
            )
        self.console.print(t)
