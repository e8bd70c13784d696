"""Command orchestration: one CLI action, several sequential API calls.

Each public method of ``CommandOrchestrator`` corresponds to one CLI
command. It validates its arguments first (no network), then resolves the
conversation number to an ID, resolves any names to IDs, and finally runs
the mutation. Calls are strictly sequential because each step needs the IDs
produced by the previous one.

Batch commands (close, open, unassign) walk the numbers in the order given,
one full lookup-then-mutate round per number, and stop at the first failure.

Usage:
    from groove.api.client import GrooveClient
    from groove.engine.orchestrator import CommandOrchestrator

    orchestrator = CommandOrchestrator(GrooveClient(token))
    orchestrator.close([123, 124], on_success=lambda n: print(f"Closed #{n}"))
    orchestrator.assign(42, "me")
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from groove.api.conversations import ConversationManager
from groove.api.directory import DirectoryManager
from groove.api.models import (
    Agent,
    CannedReply,
    Conversation,
    ConversationPage,
    Folder,
    Message,
    Tag,
)
from groove.core.errors import InvalidInputError
from groove.core.logging import get_logger
from groove.engine.inputs import (
    parse_snooze_until,
    resolve_body,
    validate_conversation_number,
    validate_conversation_numbers,
)
from groove.engine.resolver import IdentifierResolver, compose_canned_body

if TYPE_CHECKING:
    from groove.api.client import GrooveClient

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ConversationDetail:
    """A conversation together with its messages."""

    conversation: Conversation
    messages: list[Message]


class CommandOrchestrator:
    """Runs CLI-level intents against the API.

    Attributes:
        conversations: ConversationManager for conversation operations
        directory: DirectoryManager for account lookups
        resolver: IdentifierResolver for name-to-ID mapping
    """

    def __init__(self, client: "GrooveClient", stdin: TextIO | None = None):
        """Initialize the orchestrator.

        Args:
            client: GrooveClient for API calls
            stdin: Stream to read piped bodies from (default: sys.stdin)
        """
        self.conversations = ConversationManager(client)
        self.directory = DirectoryManager(client)
        self.resolver = IdentifierResolver(self.directory)
        self._stdin = stdin

    # ------------------------------------------------------------------
    # Read commands
    # ------------------------------------------------------------------

    def me(self) -> Agent:
        return self.directory.me()

    def list_folders(self) -> list[Folder]:
        return self.directory.list_folders()

    def list_tags(self) -> list[Tag]:
        return self.directory.list_tags()

    def list_agents(self) -> list[Agent]:
        return self.directory.list_agents()

    def list_canned_replies(self) -> list[CannedReply]:
        return self.directory.list_canned_replies()

    def show_canned_reply(self, identifier: str) -> CannedReply:
        return self.resolver.find_canned_reply(identifier)

    def list_conversations(
        self,
        limit: int | None = None,
        after: str | None = None,
        state: str | None = None,
        folder: str | None = None,
        search: str | None = None,
    ) -> ConversationPage:
        """List conversations, resolving a folder name to its ID first."""
        if limit is not None and limit <= 0:
            raise InvalidInputError(f"Invalid limit: {limit}. Limit must be positive")

        folder_id = self.resolver.resolve_folder_id(folder) if folder else None

        return self.conversations.list_conversations(
            first=limit,
            after=after,
            state=state,
            folder_id=folder_id,
            search=search,
        )

    def view(self, number: int) -> ConversationDetail:
        """Fetch a conversation and its messages."""
        validate_conversation_number(number)

        conversation = self.conversations.get_conversation(number)
        messages = self.conversations.list_messages(conversation.id)
        return ConversationDetail(conversation=conversation, messages=messages)

    # ------------------------------------------------------------------
    # Single-conversation mutations
    # ------------------------------------------------------------------

    def reply(self, number: int, body: str | None = None, canned: str | None = None) -> None:
        """Send a reply.

        With ``canned``, the canned body is sent, followed by ``body`` if
        given. Without it, ``body`` or piped input is used.
        """
        validate_conversation_number(number)
        if canned is None:
            body = resolve_body(body, self._stdin)

        conversation = self.conversations.get_conversation(number)

        if canned is not None:
            reply = self.resolver.find_canned_reply(canned)
            body = compose_canned_body(reply, body)

        self.conversations.reply(conversation.id, body)
        logger.info("reply_sent", number=number, canned=canned is not None)

    def note(self, number: int, body: str | None = None) -> None:
        validate_conversation_number(number)
        body = resolve_body(body, self._stdin)

        conversation = self.conversations.get_conversation(number)
        self.conversations.add_note(conversation.id, body)
        logger.info("note_added", number=number)

    def snooze(self, number: int, duration: str) -> str:
        """Snooze a conversation and return the RFC3339 wake-up time."""
        validate_conversation_number(number)
        until = parse_snooze_until(duration)

        conversation = self.conversations.get_conversation(number)
        self.conversations.snooze(conversation.id, until)
        logger.info("conversation_snoozed", number=number, until=until)
        return until

    def assign(self, number: int, agent: str) -> str:
        """Assign a conversation and return the resolved agent ID.

        ``agent`` is "me", an agent email, or an agent name.
        """
        validate_conversation_number(number)
        if not agent.strip():
            raise InvalidInputError("Agent must not be empty")

        conversation = self.conversations.get_conversation(number)
        agent_id = self.resolver.resolve_agent_id(agent)
        self.conversations.assign(conversation.id, agent_id)
        logger.info("conversation_assigned", number=number, agent_id=agent_id)
        return agent_id

    def add_tags(self, number: int, tags: list[str]) -> list[str]:
        """Tag a conversation. Returns the tag IDs sent."""
        validate_conversation_number(number)
        self._require_tags(tags)

        conversation = self.conversations.get_conversation(number)
        tag_ids = self.resolver.resolve_tag_ids(tags)
        self.conversations.tag(conversation.id, tag_ids)
        logger.info("conversation_tagged", number=number, tag_count=len(tag_ids))
        return tag_ids

    def remove_tags(self, number: int, tags: list[str]) -> list[str]:
        """Untag a conversation. Returns the tag IDs sent."""
        validate_conversation_number(number)
        self._require_tags(tags)

        conversation = self.conversations.get_conversation(number)
        tag_ids = self.resolver.resolve_tag_ids(tags)
        self.conversations.untag(conversation.id, tag_ids)
        logger.info("conversation_untagged", number=number, tag_count=len(tag_ids))
        return tag_ids

    # ------------------------------------------------------------------
    # Batch mutations
    # ------------------------------------------------------------------

    def close(
        self, numbers: list[int], on_success: Callable[[int], None] | None = None
    ) -> list[int]:
        return self._for_each(numbers, self.conversations.close, on_success)

    def open(
        self, numbers: list[int], on_success: Callable[[int], None] | None = None
    ) -> list[int]:
        return self._for_each(numbers, self.conversations.open, on_success)

    def unassign(
        self, numbers: list[int], on_success: Callable[[int], None] | None = None
    ) -> list[int]:
        return self._for_each(numbers, self.conversations.unassign, on_success)

    def _for_each(
        self,
        numbers: list[int],
        mutation: Callable[[str], None],
        on_success: Callable[[int], None] | None,
    ) -> list[int]:
        """Apply a mutation to each conversation number in order.

        All numbers are validated before the first request. The first
        failure propagates and the remaining numbers are not touched.

        Returns:
            The numbers that were processed, in order
        """
        numbers = validate_conversation_numbers(numbers)

        done: list[int] = []
        for number in numbers:
            conversation = self.conversations.get_conversation(number)
            mutation(conversation.id)
            done.append(number)
            if on_success is not None:
                on_success(number)

        logger.debug("batch_complete", processed=len(done))
        return done

    @staticmethod
    def _require_tags(tags: list[str]) -> None:
        if not tags:
            raise InvalidInputError("At least one tag name is required")
