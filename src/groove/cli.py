"""Command-line interface for the Groove helpdesk.

Provides commands for conversations, folders, tags, canned replies, agents,
configuration and shell completions.

Usage:
    groove conversation list --status open
    groove conversation view 12345
    groove conversation reply 12345 "Thanks for reaching out!"
    groove config show
"""

from __future__ import annotations

import functools
import os
import sys
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import click
from click.shell_completion import get_completion_class
from rich.console import Console
from rich.markup import escape

from groove import __version__
from groove.api.client import GrooveClient
from groove.api.conversations import DEFAULT_PAGE_SIZE
from groove.auth import resolve_token
from groove.config import get_config_path, load_config, mask_token, save_config, set_token
from groove.config_schema import OUTPUT_FORMATS, DefaultSettings, GrooveConfig
from groove.core.errors import GrooveError
from groove.core.logging import configure_logging, get_logger, set_invocation_id
from groove.engine import CommandOrchestrator
from groove.output import OutputFormatter

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

logger = get_logger(__name__)

DEBUG_ENV_VAR = "GROOVE_DEBUG"
LOG_JSON_ENV_VAR = "GROOVE_LOG_JSON"
COMPLETION_SHELLS = ("bash", "zsh", "fish")


def _debug_env() -> bool:
    return bool(os.environ.get(DEBUG_ENV_VAR))


def _log_json_env() -> bool:
    return bool(os.environ.get(LOG_JSON_ENV_VAR))


@dataclass
class CLIState:
    """Global options plus lazily built config and API access."""

    fmt: str | None = None
    token: str | None = None
    quiet: bool = False
    verbose: bool = False
    _config: GrooveConfig | None = field(default=None, repr=False)

    @property
    def config(self) -> GrooveConfig:
        if self._config is None:
            self._config = load_config()
        return self._config

    @property
    def output_format(self) -> str:
        return self.fmt or self.config.defaults.format or "table"

    def formatter(self) -> OutputFormatter:
        return OutputFormatter(console, self.output_format)

    def orchestrator(self) -> CommandOrchestrator:
        """Resolve the token and build an orchestrator for this invocation."""
        token = resolve_token(self.token, self.config)
        client = GrooveClient(token, endpoint=self.config.api_endpoint)
        click.get_current_context().call_on_close(client.close)
        return CommandOrchestrator(client, stdin=sys.stdin)

    def success(self, message: str) -> None:
        if not self.quiet:
            console.print(message, markup=False, highlight=False)


pass_state = click.make_pass_decorator(CLIState, ensure=True)


def _print_error(error: BaseException, show_causes: bool) -> None:
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
    if not show_causes:
        return
    cause = error.__cause__
    while cause is not None:
        err_console.print(f"Caused by: {escape(str(cause))}", highlight=False)
        cause = cause.__cause__


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report GrooveError as a one-line message and exit 1 (130 on Ctrl-C)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            err_console.print("\n[yellow]Cancelled.[/yellow]")
            sys.exit(130)
        except GrooveError as e:
            logger.debug("command_failed", error_type=type(e).__name__)
            state = click.get_current_context().find_object(CLIState)
            verbose = state.verbose if state is not None else False
            _print_error(e, verbose or _debug_env())
            sys.exit(1)

    return wrapper


class AliasedGroup(click.Group):
    """click.Group that also accepts short aliases for its subcommands."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.aliases: dict[str, str] = {}

    def alias(self, name: str, *aliases: str) -> None:
        for alias in aliases:
            self.aliases[alias] = name

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        _, cmd, remaining = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, remaining


@click.group(cls=AliasedGroup)
@click.option(
    "--format",
    "-o",
    "fmt",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default=None,
    help="Output format (table, json, compact)",
)
@click.option("--token", default=None, help="API token (overrides config file and env var)")
@click.option("--quiet", "-q", is_flag=True, help="Suppress success messages")
@click.option("--verbose", "-v", is_flag=True, help="Show the cause chain of errors")
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="groove")
@click.pass_context
def cli(
    ctx: click.Context,
    fmt: str | None,
    token: str | None,
    quiet: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """GrooveHQ CLI - Manage your inbox from the terminal."""
    log_level = "DEBUG" if debug or _debug_env() else "WARNING"
    configure_logging(log_level=log_level, json_output=_log_json_env())
    set_invocation_id(uuid.uuid4().hex[:8])

    ctx.obj = CLIState(
        fmt=fmt.lower() if fmt else None,
        token=token,
        quiet=quiet,
        verbose=verbose,
    )


# ---------------------------------------------------------------------------
# conversation
# ---------------------------------------------------------------------------


@cli.group("conversation", cls=AliasedGroup)
def conversation() -> None:
    """Manage conversations."""


cli.alias("conversation", "conv", "c")


@conversation.command("list")
@click.option("--status", "-s", default=None, help="Filter by status (open, closed, snoozed, unread)")
@click.option("--folder", "-f", default=None, help="Filter by folder name or ID")
@click.option("--search", "-q", default=None, help="Search by keyword in subject/body")
@click.option(
    "--limit",
    "-n",
    type=int,
    default=None,
    help=f"Number of results to show (default: {DEFAULT_PAGE_SIZE}, or from config)",
)
@click.option("--after", default=None, help="Cursor for pagination")
@pass_state
@handle_errors
def conversation_list(
    state: CLIState,
    status: str | None,
    folder: str | None,
    search: str | None,
    limit: int | None,
    after: str | None,
) -> None:
    """List conversations."""
    defaults = state.config.defaults
    page = state.orchestrator().list_conversations(
        limit=limit if limit is not None else (defaults.limit or DEFAULT_PAGE_SIZE),
        after=after,
        state=status,
        folder=folder if folder is not None else defaults.folder,
        search=search,
    )
    state.formatter().conversations(page)


conversation.alias("list", "ls", "l")


@conversation.command("view")
@click.argument("number", type=int)
@click.option("--full", is_flag=True, help="Show full message bodies (not truncated)")
@pass_state
@handle_errors
def conversation_view(state: CLIState, number: int, full: bool) -> None:
    """Show a conversation with its messages."""
    detail = state.orchestrator().view(number)
    state.formatter().conversation_detail(detail.conversation, detail.messages, full=full)


conversation.alias("view", "show", "v")


@conversation.command("reply")
@click.argument("number", type=int)
@click.argument("body", required=False)
@click.option("--canned", "-c", default=None, help="Use a canned reply by name or ID")
@pass_state
@handle_errors
def conversation_reply(
    state: CLIState, number: int, body: str | None, canned: str | None
) -> None:
    """Reply to a conversation.

    The body is read from stdin when not given. With --canned, BODY is
    appended after the canned text.
    """
    state.orchestrator().reply(number, body=body, canned=canned)
    state.success(f"Reply sent to conversation #{number}")


conversation.alias("reply", "r")


@conversation.command("note")
@click.argument("number", type=int)
@click.argument("body", required=False)
@pass_state
@handle_errors
def conversation_note(state: CLIState, number: int, body: str | None) -> None:
    """Add a private note to a conversation."""
    state.orchestrator().note(number, body=body)
    state.success(f"Note added to conversation #{number}")


@conversation.command("close")
@click.argument("numbers", type=int, nargs=-1, required=True)
@pass_state
@handle_errors
def conversation_close(state: CLIState, numbers: tuple[int, ...]) -> None:
    """Close one or more conversations."""
    state.orchestrator().close(
        list(numbers), on_success=lambda n: state.success(f"Closed conversation #{n}")
    )


@conversation.command("open")
@click.argument("numbers", type=int, nargs=-1, required=True)
@pass_state
@handle_errors
def conversation_open(state: CLIState, numbers: tuple[int, ...]) -> None:
    """Reopen one or more conversations."""
    state.orchestrator().open(
        list(numbers), on_success=lambda n: state.success(f"Opened conversation #{n}")
    )


@conversation.command("unassign")
@click.argument("numbers", type=int, nargs=-1, required=True)
@pass_state
@handle_errors
def conversation_unassign(state: CLIState, numbers: tuple[int, ...]) -> None:
    """Remove the assignee from one or more conversations."""
    state.orchestrator().unassign(
        list(numbers), on_success=lambda n: state.success(f"Unassigned conversation #{n}")
    )


@conversation.command("snooze")
@click.argument("number", type=int)
@click.argument("duration")
@pass_state
@handle_errors
def conversation_snooze(state: CLIState, number: int, duration: str) -> None:
    """Snooze a conversation.

    DURATION is e.g. 30m, 2h, 5d, 1w, or an ISO datetime.
    """
    until = state.orchestrator().snooze(number, duration)
    state.success(f"Snoozed conversation #{number} until {until}")


@conversation.command("assign")
@click.argument("number", type=int)
@click.argument("agent")
@pass_state
@handle_errors
def conversation_assign(state: CLIState, number: int, agent: str) -> None:
    """Assign a conversation to an agent (email, name, or "me")."""
    state.orchestrator().assign(number, agent)
    state.success(f"Assigned conversation #{number} to {agent}")


@conversation.command("add-tag")
@click.argument("number", type=int)
@click.argument("tags", nargs=-1, required=True)
@pass_state
@handle_errors
def conversation_add_tag(state: CLIState, number: int, tags: tuple[str, ...]) -> None:
    """Add tags to a conversation."""
    state.orchestrator().add_tags(number, list(tags))
    state.success(f"Added tags to conversation #{number}")


conversation.alias("add-tag", "tag")


@conversation.command("remove-tag")
@click.argument("number", type=int)
@click.argument("tags", nargs=-1, required=True)
@pass_state
@handle_errors
def conversation_remove_tag(state: CLIState, number: int, tags: tuple[str, ...]) -> None:
    """Remove tags from a conversation."""
    state.orchestrator().remove_tags(number, list(tags))
    state.success(f"Removed tags from conversation #{number}")


conversation.alias("remove-tag", "untag")


# ---------------------------------------------------------------------------
# folder / tag / agent / canned-replies / me
# ---------------------------------------------------------------------------


@cli.group("folder", cls=AliasedGroup)
def folder() -> None:
    """List folders."""


cli.alias("folder", "f")


@folder.command("list")
@pass_state
@handle_errors
def folder_list(state: CLIState) -> None:
    """List all folders."""
    state.formatter().folders(state.orchestrator().list_folders())


folder.alias("list", "ls", "l")


@cli.group("tag", cls=AliasedGroup)
def tag() -> None:
    """List tags."""


cli.alias("tag", "t")


@tag.command("list")
@pass_state
@handle_errors
def tag_list(state: CLIState) -> None:
    """List all tags."""
    state.formatter().tags(state.orchestrator().list_tags())


tag.alias("list", "ls", "l")


@cli.group("agent", cls=AliasedGroup)
def agent() -> None:
    """List agents."""


@agent.command("list")
@pass_state
@handle_errors
def agent_list(state: CLIState) -> None:
    """List all agents."""
    state.formatter().agents(state.orchestrator().list_agents())


agent.alias("list", "ls", "l")


@cli.group("canned-replies", cls=AliasedGroup)
def canned_replies() -> None:
    """List and show canned replies."""


cli.alias("canned-replies", "canned")


@canned_replies.command("list")
@pass_state
@handle_errors
def canned_replies_list(state: CLIState) -> None:
    """List all canned replies."""
    state.formatter().canned_replies(state.orchestrator().list_canned_replies())


canned_replies.alias("list", "ls", "l")


@canned_replies.command("show")
@click.argument("name")
@pass_state
@handle_errors
def canned_replies_show(state: CLIState, name: str) -> None:
    """Show a canned reply by name or ID."""
    state.formatter().canned_reply(state.orchestrator().show_canned_reply(name))


@cli.command("me")
@pass_state
@handle_errors
def me(state: CLIState) -> None:
    """Show the current agent."""
    state.formatter().agent(state.orchestrator().me())


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.group("config", cls=AliasedGroup)
def config_group() -> None:
    """Manage configuration."""


cli.alias("config", "cfg")


@config_group.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@pass_state
@handle_errors
def config_init(state: CLIState, force: bool) -> None:
    """Interactive configuration setup."""
    path = get_config_path()
    if path.exists() and not force:
        click.confirm(f"{path} already exists. Overwrite?", abort=True)

    token = click.prompt("API token", hide_input=True)
    fmt = click.prompt(
        "Default output format",
        type=click.Choice(OUTPUT_FORMATS),
        default="table",
        show_default=True,
    )
    limit = click.prompt(
        "Default page size", type=click.IntRange(min=1), default=DEFAULT_PAGE_SIZE
    )

    config = GrooveConfig(
        api_token=token.strip(),
        defaults=DefaultSettings(format=fmt, limit=limit),
    )
    written = save_config(config, path)
    state.success(f"Configuration saved to {written}")


@config_group.command("show")
@pass_state
@handle_errors
def config_show(state: CLIState) -> None:
    """Show the current configuration (token masked)."""
    config = state.config
    lines = [
        f"api_token: {mask_token(config.api_token) if config.api_token else '(not set)'}",
        f"api_endpoint: {config.api_endpoint or '(default)'}",
        f"defaults.format: {config.defaults.format or '(not set)'}",
        f"defaults.limit: {config.defaults.limit or '(not set)'}",
        f"defaults.folder: {config.defaults.folder or '(not set)'}",
    ]
    for line in lines:
        console.print(line, markup=False, highlight=False)


@config_group.command("set-token")
@click.argument("token")
@pass_state
@handle_errors
def config_set_token(state: CLIState, token: str) -> None:
    """Store an API token in the config file."""
    set_token(token)
    state.success("Token saved successfully")


@config_group.command("path")
def config_path() -> None:
    """Print the config file path."""
    click.echo(str(get_config_path()))


# ---------------------------------------------------------------------------
# completions
# ---------------------------------------------------------------------------


@cli.command("completions")
@click.argument("shell", type=click.Choice(COMPLETION_SHELLS))
def completions(shell: str) -> None:
    """Generate a shell completion script.

    \b
    groove completions bash > ~/.bash_completion.d/groove
    groove completions zsh > ~/.zfunc/_groove
    groove completions fish > ~/.config/fish/completions/groove.fish
    """
    comp_cls = get_completion_class(shell)
    if comp_cls is None:
        raise click.BadParameter(f"Unsupported shell: {shell}")
    completer = comp_cls(cli, {}, "groove", "_GROOVE_COMPLETE")
    click.echo(completer.source())


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
