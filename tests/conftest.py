"""Pytest fixtures and configuration for Groove CLI tests.

Provides environment isolation, sample API payloads, and a scripted
GraphQL backend that stands in for the network.
"""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from groove.api.client import GrooveClient
from groove.api.queries import operation_name


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config path at a temp dir and clear token/debug variables."""
    config_path = tmp_path / "groove" / "config.yaml"
    monkeypatch.setenv("GROOVE_CONFIG_PATH", str(config_path))
    monkeypatch.delenv("GROOVEHQ_API_TOKEN", raising=False)
    monkeypatch.delenv("GROOVE_DEBUG", raising=False)
    monkeypatch.delenv("GROOVE_LOG_JSON", raising=False)
    return config_path


@pytest.fixture
def config_path(isolated_env: Path) -> Path:
    """Return the (not yet existing) config file path used by the tests."""
    return isolated_env


# ---------------------------------------------------------------------------
# Sample payloads (wire shape, camelCase)
# ---------------------------------------------------------------------------


def conversation_payload(number: int = 42, **overrides: Any) -> dict[str, Any]:
    """Return a conversation object as the API sends it."""
    payload: dict[str, Any] = {
        "id": f"conv-{number}",
        "number": number,
        "subject": f"Subject {number}",
        "state": "OPENED",
        "createdAt": "2024-01-10T09:00:00Z",
        "updatedAt": "2024-01-11T10:30:00Z",
        "snoozedUntil": None,
        "messagesCount": 2,
        "assigned": None,
        "contact": {"id": "contact-1", "email": "customer@example.com", "name": "Casey"},
        "channel": {"id": "channel-1", "name": "Support"},
        "tags": [],
    }
    payload.update(overrides)
    return payload


def page_payload(
    nodes: list[dict[str, Any]],
    total: int | None = None,
    has_next_page: bool = False,
    end_cursor: str | None = None,
) -> dict[str, Any]:
    return {
        "conversations": {
            "nodes": nodes,
            "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
            "totalCount": len(nodes) if total is None else total,
        }
    }


def connection(field: str, nodes: list[dict[str, Any]]) -> dict[str, Any]:
    return {field: {"nodes": nodes}}


def mutation_ok(field: str) -> dict[str, Any]:
    return {field: {"conversation": {"id": "ignored"}, "errors": []}}


AGENTS = [
    {"id": "agent-1", "email": "alice@example.com", "name": "Alice"},
    {"id": "agent-2", "email": "bob@example.com", "name": "Bob"},
]

TAGS = [
    {"id": "tag-1", "name": "Urgent", "color": "#ff0000"},
    {"id": "tag-2", "name": "billing", "color": None},
]

FOLDERS = [
    {"id": "folder-1", "name": "Inbox", "count": 12},
    {"id": "folder-2", "name": "Escalations", "count": 3},
]

CANNED_REPLIES = [
    {"id": "canned-1", "name": "Greeting", "subject": "Hello", "body": "Hi there!"},
    {"id": "canned-2", "name": "Empty", "subject": None, "body": None},
]

ME = {"me": {"id": "agent-me", "email": "me@example.com", "name": "Me", "role": "admin"}}


# ---------------------------------------------------------------------------
# Scripted GraphQL backend
# ---------------------------------------------------------------------------


class FakeGroove:
    """Answers GrooveClient.execute calls by GraphQL operation name.

    A response may be a data dict, an exception instance to raise, or a
    callable taking the variables and returning either. Every call is
    recorded as ``(operation, variables)``.
    """

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def on(self, operation: str, response: Any) -> "FakeGroove":
        self.responses[operation] = response
        return self

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        operation = operation_name(query)
        variables = variables or {}
        self.calls.append((operation, variables))

        if operation not in self.responses:
            raise AssertionError(f"unexpected operation: {operation}")

        response = self.responses[operation]
        if callable(response) and not isinstance(response, dict):
            response = response(variables)
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]

    def variables_for(self, operation: str) -> list[dict[str, Any]]:
        return [variables for op, variables in self.calls if op == operation]

    def with_standard_directory(self) -> "FakeGroove":
        """Register Me, Agents, Tags, Folders and CannedReplies responses."""
        return (
            self.on("Me", ME)
            .on("Agents", connection("agents", AGENTS))
            .on("Tags", connection("tags", TAGS))
            .on("Folders", connection("folders", FOLDERS))
            .on("CannedReplies", connection("cannedReplies", CANNED_REPLIES))
        )

    def with_conversation(self, *numbers: int, **overrides: Any) -> "FakeGroove":
        """Answer Conversation queries for the given numbers; others are not found."""
        known = set(numbers)

        def answer(variables: dict[str, Any]) -> dict[str, Any]:
            number = variables["number"]
            if number in known:
                return {"conversation": conversation_payload(number, **overrides)}
            return {"conversation": None}

        return self.on("Conversation", answer)

    def with_mutations(self) -> "FakeGroove":
        for operation, field in (
            ("Reply", "conversationReply"),
            ("Close", "conversationClose"),
            ("Open", "conversationOpen"),
            ("Snooze", "conversationSnooze"),
            ("Assign", "conversationAssign"),
            ("Unassign", "conversationUnassign"),
            ("AddNote", "conversationAddNote"),
            ("Tag", "conversationTag"),
            ("Untag", "conversationUntag"),
        ):
            self.on(operation, mutation_ok(field))
        return self


@pytest.fixture
def fake_api() -> FakeGroove:
    return FakeGroove()


@pytest.fixture
def client(fake_api: FakeGroove) -> Generator[GrooveClient, None, None]:
    """A real GrooveClient whose execute() is answered by fake_api."""
    groove_client = GrooveClient("test-token")
    groove_client.execute = MagicMock(side_effect=fake_api.execute)  # type: ignore[method-assign]
    yield groove_client
    groove_client.close()


@pytest.fixture
def client_factory(fake_api: FakeGroove) -> Callable[..., GrooveClient]:
    """Drop-in replacement for the GrooveClient class used by the CLI."""
    created: list[GrooveClient] = []

    def factory(token: str, endpoint: str | None = None, **kwargs: Any) -> GrooveClient:
        groove_client = GrooveClient(token, endpoint=endpoint, **kwargs)
        groove_client.execute = MagicMock(side_effect=fake_api.execute)  # type: ignore[method-assign]
        created.append(groove_client)
        return groove_client

    factory.created = created  # type: ignore[attr-defined]
    return factory
