"""Tests for ConversationManager queries and mutations."""

import pytest

from conftest import FakeGroove, conversation_payload, mutation_ok, page_payload
from groove.api.client import GrooveClient
from groove.api.conversations import ConversationManager
from groove.core.errors import ConversationNotFound, GraphQLError, ResponseDecodeError


@pytest.fixture
def conversations(client: GrooveClient) -> ConversationManager:
    return ConversationManager(client)


# ---------------------------------------------------------------------------
# list_conversations
# ---------------------------------------------------------------------------


class TestListConversations:
    """Tests for variable construction and page decoding."""

    def test_defaults_send_only_first(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        """Should send first=25 and omit after and filter entirely."""
        fake_api.on("Conversations", page_payload([conversation_payload(1)]))

        page = conversations.list_conversations()

        assert fake_api.variables_for("Conversations") == [{"first": 25}]
        assert [c.number for c in page.nodes] == [1]

    def test_full_filter(self, conversations: ConversationManager, fake_api: FakeGroove) -> None:
        """Should map state, folder and search onto filter keys."""
        fake_api.on("Conversations", page_payload([]))

        conversations.list_conversations(
            first=10, after="cursor-1", state="open", folder_id="folder-9", search="refund"
        )

        assert fake_api.variables_for("Conversations") == [
            {
                "first": 10,
                "after": "cursor-1",
                "filter": {"state": "OPENED", "folderId": "folder-9", "keywords": "refund"},
            }
        ]

    def test_partial_filter_omits_missing_keys(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        fake_api.on("Conversations", page_payload([]))

        conversations.list_conversations(search="invoice")

        variables = fake_api.variables_for("Conversations")[0]
        assert variables["filter"] == {"keywords": "invoice"}
        assert "after" not in variables

    def test_page_info_and_total(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        fake_api.on(
            "Conversations",
            page_payload(
                [conversation_payload(1), conversation_payload(2)],
                total=80,
                has_next_page=True,
                end_cursor="next",
            ),
        )

        page = conversations.list_conversations(first=2)

        assert page.total_count == 80
        assert page.page_info.has_next_page is True
        assert page.page_info.end_cursor == "next"

    def test_malformed_page_is_decode_error(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        fake_api.on("Conversations", {"conversations": {"nodes": "nope"}})

        with pytest.raises(ResponseDecodeError):
            conversations.list_conversations()


# ---------------------------------------------------------------------------
# get_conversation / list_messages
# ---------------------------------------------------------------------------


class TestGetConversation:
    """Tests for number-to-conversation lookup."""

    def test_found(self, conversations: ConversationManager, fake_api: FakeGroove) -> None:
        fake_api.with_conversation(42)

        conv = conversations.get_conversation(42)

        assert conv.id == "conv-42"
        assert fake_api.variables_for("Conversation") == [{"number": 42}]

    def test_null_is_not_found(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        """Should raise ConversationNotFound with the number when the API returns null."""
        fake_api.with_conversation()

        with pytest.raises(ConversationNotFound) as exc_info:
            conversations.get_conversation(99)

        assert exc_info.value.number == 99
        assert str(exc_info.value) == "Conversation #99 not found"


class TestListMessages:
    """Tests for message retrieval."""

    def test_returns_messages_with_default_page_size(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        fake_api.on(
            "Messages",
            {
                "node": {
                    "messages": {
                        "nodes": [
                            {
                                "id": "m1",
                                "createdAt": "2024-01-01T10:00:00Z",
                                "bodyText": "Hello",
                                "author": {"__typename": "Contact", "id": "c1"},
                            }
                        ]
                    }
                }
            },
        )

        messages = conversations.list_messages("conv-1")

        assert [m.id for m in messages] == ["m1"]
        assert fake_api.variables_for("Messages") == [{"id": "conv-1", "first": 50}]

    def test_missing_node_is_empty(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        """Should return [] when the conversation node does not exist."""
        fake_api.on("Messages", {"node": None})

        assert conversations.list_messages("gone") == []

    def test_node_without_messages_is_empty(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        fake_api.on("Messages", {"node": {}})

        assert conversations.list_messages("conv-1", first=5) == []
        assert fake_api.variables_for("Messages") == [{"id": "conv-1", "first": 5}]


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


class TestMutations:
    """Tests for mutation inputs."""

    @pytest.mark.parametrize(
        ("method", "args", "operation", "expected_input"),
        [
            ("reply", ("c1", "Thanks"), "Reply", {"conversationId": "c1", "body": "Thanks"}),
            ("add_note", ("c1", "FYI"), "AddNote", {"conversationId": "c1", "body": "FYI"}),
            ("close", ("c1",), "Close", {"conversationId": "c1"}),
            ("open", ("c1",), "Open", {"conversationId": "c1"}),
            ("unassign", ("c1",), "Unassign", {"conversationId": "c1"}),
            (
                "snooze",
                ("c1", "2024-12-25T10:00:00Z"),
                "Snooze",
                {"conversationId": "c1", "snoozedUntil": "2024-12-25T10:00:00Z"},
            ),
            ("assign", ("c1", "a1"), "Assign", {"conversationId": "c1", "assigneeId": "a1"}),
            ("tag", ("c1", ["t1", "t2"]), "Tag", {"conversationId": "c1", "tagIds": ["t1", "t2"]}),
            ("untag", ("c1", ["t1"]), "Untag", {"conversationId": "c1", "tagIds": ["t1"]}),
        ],
    )
    def test_mutation_input(
        self,
        conversations: ConversationManager,
        fake_api: FakeGroove,
        method: str,
        args: tuple,
        operation: str,
        expected_input: dict,
    ) -> None:
        fake_api.with_mutations()

        getattr(conversations, method)(*args)

        assert fake_api.calls == [(operation, {"input": expected_input})]

    def test_payload_errors_surface(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        """Should raise GraphQLError from the mutation payload errors."""
        fake_api.on(
            "Close",
            {"conversationClose": {"errors": [{"message": "already closed"}]}},
        )

        with pytest.raises(GraphQLError, match="already closed"):
            conversations.close("c1")

    def test_success_payload(
        self, conversations: ConversationManager, fake_api: FakeGroove
    ) -> None:
        fake_api.on("Open", mutation_ok("conversationOpen"))

        conversations.open("c1")

        assert fake_api.operations == ["Open"]
