"""Conversation queries and mutations.

This module provides the conversation half of the operation catalog:
- Listing conversations (cursor pagination, optional filter)
- Fetching one conversation by its human-facing number
- Fetching the messages of a conversation
- State, assignment, snooze, reply, note and tag mutations

Mutations only ever take the opaque conversation ID. Resolve a number to an
ID with ``get_conversation()`` first.

Usage:
    from groove.api.client import GrooveClient
    from groove.api.conversations import ConversationManager

    conversations = ConversationManager(GrooveClient(token))

    page = conversations.list_conversations(state="open")
    conv = conversations.get_conversation(123)
    conversations.close(conv.id)
"""

from typing import TYPE_CHECKING, Any

from groove.api import queries
from groove.api.client import decode
from groove.api.models import Conversation, ConversationPage, Message, state_filter_value
from groove.core.errors import ConversationNotFound
from groove.core.logging import get_logger

if TYPE_CHECKING:
    from groove.api.client import GrooveClient

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 25
DEFAULT_MESSAGES_PAGE_SIZE = 50


class ConversationManager:
    """Conversation operations over a GrooveClient.

    Attributes:
        client: GrooveClient instance for API calls
    """

    def __init__(self, client: "GrooveClient"):
        self.client = client

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_conversations(
        self,
        first: int | None = None,
        after: str | None = None,
        state: str | None = None,
        folder_id: str | None = None,
        search: str | None = None,
    ) -> ConversationPage:
        """List one page of conversations.

        Filter fields that are not given are left out of the request
        entirely, and so is the filter itself when it would be empty.

        Args:
            first: Page size (default 25)
            after: ``endCursor`` from a previous page; omit for the first page
            state: State filter, display or wire name ("open", "CLOSED")
            folder_id: Folder ID filter
            search: Keyword search

        Returns:
            ConversationPage with nodes, page info and total count
        """
        conversation_filter: dict[str, Any] = {}
        if state:
            conversation_filter["state"] = state_filter_value(state)
        if folder_id:
            conversation_filter["folderId"] = folder_id
        if search:
            conversation_filter["keywords"] = search

        variables: dict[str, Any] = {
            "first": first if first is not None else DEFAULT_PAGE_SIZE,
        }
        if after:
            variables["after"] = after
        if conversation_filter:
            variables["filter"] = conversation_filter

        data = self.client.execute(queries.CONVERSATIONS, variables)
        page = decode(ConversationPage, data.get("conversations"), "conversations")

        logger.debug(
            "conversations_listed",
            returned=len(page.nodes),
            total=page.total_count,
            has_next_page=page.page_info.has_next_page,
        )
        return page

    def get_conversation(self, number: int) -> Conversation:
        """Fetch a conversation by its human-facing number.

        Raises:
            ConversationNotFound: If the API returns no conversation
        """
        data = self.client.execute(queries.CONVERSATION, {"number": number})

        raw = data.get("conversation")
        if raw is None:
            raise ConversationNotFound(number)

        return decode(Conversation, raw, "conversation")

    def list_messages(self, conversation_id: str, first: int | None = None) -> list[Message]:
        """Fetch the messages of a conversation.

        A conversation node that no longer exists and a conversation with no
        messages both produce an empty list.

        Args:
            conversation_id: Opaque conversation ID
            first: Maximum messages to return (default 50)
        """
        variables = {
            "id": conversation_id,
            "first": first if first is not None else DEFAULT_MESSAGES_PAGE_SIZE,
        }
        data = self.client.execute(queries.MESSAGES, variables)

        node = data.get("node")
        if node is None:
            logger.debug("messages_node_missing", conversation_id=conversation_id)
            return []

        nodes = (node.get("messages") or {}).get("nodes") or []
        return [decode(Message, raw, "message") for raw in nodes]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def reply(self, conversation_id: str, body: str) -> None:
        self.client.mutate(
            queries.REPLY,
            "conversationReply",
            {"conversationId": conversation_id, "body": body},
        )

    def close(self, conversation_id: str) -> None:
        self.client.mutate(
            queries.CLOSE,
            "conversationClose",
            {"conversationId": conversation_id},
        )

    def open(self, conversation_id: str) -> None:
        self.client.mutate(
            queries.OPEN,
            "conversationOpen",
            {"conversationId": conversation_id},
        )

    def snooze(self, conversation_id: str, until: str) -> None:
        """Snooze a conversation.

        Args:
            conversation_id: Opaque conversation ID
            until: RFC3339 timestamp
        """
        self.client.mutate(
            queries.SNOOZE,
            "conversationSnooze",
            {"conversationId": conversation_id, "snoozedUntil": until},
        )

    def assign(self, conversation_id: str, agent_id: str) -> None:
        self.client.mutate(
            queries.ASSIGN,
            "conversationAssign",
            {"conversationId": conversation_id, "assigneeId": agent_id},
        )

    def unassign(self, conversation_id: str) -> None:
        self.client.mutate(
            queries.UNASSIGN,
            "conversationUnassign",
            {"conversationId": conversation_id},
        )

    def add_note(self, conversation_id: str, body: str) -> None:
        self.client.mutate(
            queries.ADD_NOTE,
            "conversationAddNote",
            {"conversationId": conversation_id, "body": body},
        )

    def tag(self, conversation_id: str, tag_ids: list[str]) -> None:
        self.client.mutate(
            queries.TAG,
            "conversationTag",
            {"conversationId": conversation_id, "tagIds": list(tag_ids)},
        )

    def untag(self, conversation_id: str, tag_ids: list[str]) -> None:
        self.client.mutate(
            queries.UNTAG,
            "conversationUntag",
            {"conversationId": conversation_id, "tagIds": list(tag_ids)},
        )
