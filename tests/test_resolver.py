"""Tests for name-to-ID resolution and canned reply composition."""

import pytest

from conftest import FakeGroove, connection
from groove.api.client import GrooveClient
from groove.api.directory import DirectoryManager
from groove.api.models import CannedReply
from groove.core.errors import AgentNotFound, CannedReplyNotFound, TagNotFound
from groove.engine.resolver import IdentifierResolver, compose_canned_body


@pytest.fixture
def resolver(client: GrooveClient, fake_api: FakeGroove) -> IdentifierResolver:
    fake_api.with_standard_directory()
    return IdentifierResolver(DirectoryManager(client))


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


class TestResolveTagIds:
    """Tests for tag name resolution."""

    def test_case_insensitive_in_order(self, resolver: IdentifierResolver) -> None:
        assert resolver.resolve_tag_ids(["BILLING", "urgent"]) == ["tag-2", "tag-1"]

    def test_unknown_name_fails_whole_request(
        self, resolver: IdentifierResolver, fake_api: FakeGroove
    ) -> None:
        """Should raise for the first unknown name and return nothing."""
        with pytest.raises(TagNotFound) as exc_info:
            resolver.resolve_tag_ids(["urgent", "nope", "missing"])

        assert str(exc_info.value) == "Tag 'nope' not found"
        assert fake_api.operations == ["Tags"]

    def test_duplicate_names_first_wins(self, client: GrooveClient, fake_api: FakeGroove) -> None:
        fake_api.on(
            "Tags",
            connection("tags", [{"id": "first", "name": "VIP"}, {"id": "second", "name": "vip"}]),
        )
        resolver = IdentifierResolver(DirectoryManager(client))

        assert resolver.resolve_tag_ids(["vip"]) == ["first"]

    def test_single_fetch_for_many_names(
        self, resolver: IdentifierResolver, fake_api: FakeGroove
    ) -> None:
        resolver.resolve_tag_ids(["urgent", "billing", "Urgent"])

        assert fake_api.operations == ["Tags"]


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------


class TestResolveAgentId:
    """Tests for assignee resolution."""

    def test_me_uses_me_query_only(
        self, resolver: IdentifierResolver, fake_api: FakeGroove
    ) -> None:
        """Should resolve 'me' without listing agents."""
        assert resolver.resolve_agent_id("me") == "agent-me"
        assert fake_api.operations == ["Me"]

    def test_by_email(self, resolver: IdentifierResolver, fake_api: FakeGroove) -> None:
        assert resolver.resolve_agent_id("bob@example.com") == "agent-2"
        assert fake_api.operations == ["Agents"]

    def test_by_name(self, resolver: IdentifierResolver) -> None:
        assert resolver.resolve_agent_id("Alice") == "agent-1"

    def test_email_match_is_exact(self, resolver: IdentifierResolver) -> None:
        with pytest.raises(AgentNotFound):
            resolver.resolve_agent_id("BOB@example.com")

    def test_unknown(self, resolver: IdentifierResolver) -> None:
        with pytest.raises(AgentNotFound) as exc_info:
            resolver.resolve_agent_id("nobody@example.com")

        assert str(exc_info.value) == "Agent 'nobody@example.com' not found"


# ---------------------------------------------------------------------------
# Canned replies
# ---------------------------------------------------------------------------


class TestCannedReplies:
    """Tests for canned reply lookup and body composition."""

    def test_find_by_name_case_insensitive(self, resolver: IdentifierResolver) -> None:
        assert resolver.find_canned_reply("greeting").id == "canned-1"

    def test_find_by_id(self, resolver: IdentifierResolver) -> None:
        assert resolver.find_canned_reply("canned-2").name == "Empty"

    def test_not_found(self, resolver: IdentifierResolver) -> None:
        with pytest.raises(CannedReplyNotFound, match="'farewell'"):
            resolver.find_canned_reply("farewell")

    def test_compose_without_extra_text(self) -> None:
        reply = CannedReply(id="c", name="n", body="Hi there!")
        assert compose_canned_body(reply) == "Hi there!"

    def test_compose_with_extra_text(self) -> None:
        """Should append free text after a blank line."""
        reply = CannedReply(id="c", name="n", body="Hi there!")
        assert compose_canned_body(reply, "Order #5 shipped.") == "Hi there!\n\nOrder #5 shipped."

    def test_compose_empty_body(self) -> None:
        reply = CannedReply(id="c", name="n", body=None)
        assert compose_canned_body(reply) == ""
        assert compose_canned_body(reply, "extra") == "\n\nextra"


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------


class TestResolveFolderId:
    """Tests for folder name resolution."""

    def test_exact_id(self, resolver: IdentifierResolver) -> None:
        assert resolver.resolve_folder_id("folder-2") == "folder-2"

    def test_name_case_insensitive(self, resolver: IdentifierResolver) -> None:
        assert resolver.resolve_folder_id("inbox") == "folder-1"

    def test_unknown_passes_through(self, resolver: IdentifierResolver) -> None:
        assert resolver.resolve_folder_id("folder-404") == "folder-404"
