"""Rendering of API results as table, JSON or compact text.

Usage:
    from rich.console import Console
    from groove.output import OutputFormatter

    formatter = OutputFormatter(Console(), "table")
    formatter.conversations(page)
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from groove.api.models import (
    Agent,
    AuthorKind,
    CannedReply,
    Conversation,
    ConversationPage,
    ConversationState,
    Folder,
    Message,
    Tag,
    state_to_display,
)

MESSAGE_PREVIEW_LINES = 10
RULE_WIDTH = 60

_STATE_STYLES: dict[ConversationState, str] = {
    ConversationState.UNREAD: "yellow",
    ConversationState.OPENED: "green",
    ConversationState.CLOSED: "white",
    ConversationState.SNOOZED: "blue",
    ConversationState.SPAM: "red",
    ConversationState.DELETED: "white",
}


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, ending with an ellipsis if cut."""
    if len(text) <= max_len:
        return text
    return text[: max(max_len - 1, 0)] + "…"


def truncate_lines(text: str, max_lines: int = MESSAGE_PREVIEW_LINES) -> str:
    lines = text.splitlines()
    if len(lines) <= max_lines:
        return text
    kept = "\n".join(lines[:max_lines])
    return f"{kept}\n  [... truncated, use --full to see all]"


def format_relative_time(moment: datetime, now: datetime | None = None) -> str:
    """Describe a past instant relative to now ("5m ago", "3d ago").

    Anything a week or older is shown as a plain date.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    reference = now or datetime.now(UTC)
    seconds = (reference - moment).total_seconds()
    minutes = int(seconds // 60)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 60 * 24:
        return f"{minutes // 60}h ago"
    if minutes < 60 * 24 * 7:
        return f"{minutes // (60 * 24)}d ago"
    return moment.strftime("%Y-%m-%d")


def state_text(state: ConversationState) -> Text:
    return Text(state_to_display(state), style=_STATE_STYLES[state])


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    return value


class OutputFormatter:
    """Prints command results in the selected output format.

    Attributes:
        console: Rich console that receives all output
        fmt: One of "table", "json", "compact"
    """

    def __init__(self, console: Console, fmt: str = "table"):
        self.console = console
        self.fmt = fmt

    def json(self, value: Any) -> None:
        self.console.print_json(data=_to_jsonable(value))

    def _label(self, label: str, value: str) -> None:
        self.console.print(f"[dim]{label}:[/dim] {escape(value)}")

    def _rule(self, width: int = RULE_WIDTH) -> None:
        self.console.print("─" * width, style="dim")

    def _table(self, *columns: str) -> Table:
        table = Table(box=box.ROUNDED)
        for column in columns:
            table.add_column(column)
        return table

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    def conversations(self, page: ConversationPage) -> None:
        if self.fmt == "json":
            self.json(page)
            return

        if self.fmt == "compact":
            for conv in page.nodes:
                subject = conv.subject or "(no subject)"
                contact = conv.contact.email if conv.contact else None
                self.console.print(
                    f"#{conv.number} [{state_to_display(conv.state)}] {subject} - "
                    f"{contact or 'unknown'}",
                    markup=False,
                    highlight=False,
                )
            return

        table = self._table("#", "Status", "Subject", "From", "Updated")
        for conv in page.nodes:
            table.add_row(
                str(conv.number),
                state_text(conv.state),
                Text(truncate(conv.subject or "(no subject)", 40)),
                Text(truncate(conv.contact.display_name if conv.contact else "unknown", 25)),
                format_relative_time(conv.updated_at),
            )
        self.console.print(table)
        self.console.print(
            f"\nShowing {len(page.nodes)} of {page.total_count} conversations",
            highlight=False,
        )
        if page.page_info.has_next_page and page.page_info.end_cursor:
            self.console.print(
                f"Next page: --after {page.page_info.end_cursor}",
                markup=False,
                highlight=False,
            )

    def conversation_detail(
        self, conversation: Conversation, messages: list[Message], full: bool = False
    ) -> None:
        """Print a conversation header followed by its messages."""
        if self.fmt == "json":
            self.json({"conversation": conversation, "messages": messages})
            return

        self._rule()
        self.console.print(f"[bold]Conversation #{conversation.number}[/bold]")
        self._rule()

        if conversation.subject:
            self._label("Subject", conversation.subject)
        self.console.print(Text("Status: ", style="dim") + state_text(conversation.state))

        contact = conversation.contact
        if contact is not None:
            email = contact.email or "unknown"
            self._label("From", f"{contact.name} <{email}>" if contact.name else email)

        if conversation.assigned is not None:
            self._label("Assigned", conversation.assigned.name or conversation.assigned.email)
        else:
            self.console.print("[dim]Assigned:[/dim] [yellow]unassigned[/yellow]")

        if conversation.tags:
            self._label("Tags", ", ".join(tag.name for tag in conversation.tags))
        if conversation.snoozed_until is not None:
            self._label("Snoozed until", conversation.snoozed_until.strftime("%Y-%m-%d %H:%M"))
        self._label("Created", conversation.created_at.strftime("%Y-%m-%d %H:%M"))

        self._rule()
        self.console.print()

        for message in messages:
            self._message(message, full)

    def _message(self, message: Message, full: bool) -> None:
        author = message.author
        name = author.display_name if author else "Unknown"
        kind = author.kind if author else AuthorKind.UNKNOWN

        if kind is AuthorKind.AGENT:
            label = Text(f"[Agent] {name}", style="cyan")
        elif kind is AuthorKind.CONTACT:
            label = Text(f"[Customer] {name}", style="green")
        else:
            label = Text(f"[{(author.typename if author else None) or 'Unknown'}] {name}")

        timestamp = Text(message.created_at.strftime("%b %d, %H:%M"), style="dim")
        self.console.print(label + Text(" • ") + timestamp)

        if message.body_text is not None:
            body = message.body_text if full else truncate_lines(message.body_text)
            self.console.print(Text(body))
            self.console.print()

    # ------------------------------------------------------------------
    # Directory listings
    # ------------------------------------------------------------------

    def folders(self, folders: list[Folder]) -> None:
        if self.fmt == "json":
            self.json(folders)
        elif self.fmt == "compact":
            for folder in folders:
                self.console.print(folder.name, markup=False, highlight=False)
        else:
            table = self._table("Name", "Count", "ID")
            for folder in folders:
                count = "-" if folder.count is None else str(folder.count)
                table.add_row(Text(folder.name), count, folder.id)
            self.console.print(table)

    def tags(self, tags: list[Tag]) -> None:
        if self.fmt == "json":
            self.json(tags)
        elif self.fmt == "compact":
            for tag in tags:
                self.console.print(tag.name, markup=False, highlight=False)
        else:
            table = self._table("Name", "Color", "ID")
            for tag in tags:
                table.add_row(Text(tag.name), tag.color or "-", tag.id)
            self.console.print(table)

    def agents(self, agents: list[Agent]) -> None:
        if self.fmt == "json":
            self.json(agents)
        elif self.fmt == "compact":
            for agent in agents:
                self.console.print(agent.email, markup=False, highlight=False)
        else:
            table = self._table("Name", "Email", "ID")
            for agent in agents:
                table.add_row(Text(agent.name or "-"), agent.email, agent.id)
            self.console.print(table)

    def canned_replies(self, replies: list[CannedReply]) -> None:
        if self.fmt == "json":
            self.json(replies)
        elif self.fmt == "compact":
            for reply in replies:
                self.console.print(reply.name, markup=False, highlight=False)
        else:
            table = self._table("Name", "Subject", "ID")
            for reply in replies:
                table.add_row(Text(reply.name), Text(reply.subject or "-"), reply.id)
            self.console.print(table)

    def canned_reply(self, reply: CannedReply) -> None:
        if self.fmt == "json":
            self.json(reply)
            return
        self._label("Name", reply.name)
        if reply.subject:
            self._label("Subject", reply.subject)
        self._rule(40)
        if reply.body:
            self.console.print(Text(reply.body))

    def agent(self, agent: Agent) -> None:
        if self.fmt == "json":
            self.json(agent)
            return
        self._label("Name", agent.name or "-")
        self._label("Email", agent.email)
        if agent.role:
            self._label("Role", agent.role)
        self._label("ID", agent.id)
