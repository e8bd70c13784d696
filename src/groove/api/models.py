"""Typed snapshots of the entities returned by the Groove GraphQL API.

Every model is an immutable value fetched fresh for one command; nothing
here is cached or written back. Field names are snake_case in Python and
camelCase on the wire (``created_at`` <-> ``createdAt``).

Usage:
    from groove.api.models import Conversation, state_to_display

    conv = Conversation.model_validate(payload["conversation"])
    print(conv.number, state_to_display(conv.state))
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class GrooveModel(BaseModel):
    """Base for API models: camelCase aliases, frozen, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Conversation state
# ---------------------------------------------------------------------------


class ConversationState(StrEnum):
    """Closed set of conversation states. Member values are the wire names."""

    UNREAD = "UNREAD"
    OPENED = "OPENED"
    CLOSED = "CLOSED"
    SNOOZED = "SNOOZED"
    SPAM = "SPAM"
    DELETED = "DELETED"


_STATE_WIRE_NAMES: dict[ConversationState, str] = {
    ConversationState.UNREAD: "UNREAD",
    ConversationState.OPENED: "OPENED",
    ConversationState.CLOSED: "CLOSED",
    ConversationState.SNOOZED: "SNOOZED",
    ConversationState.SPAM: "SPAM",
    ConversationState.DELETED: "DELETED",
}

_STATE_DISPLAY_NAMES: dict[ConversationState, str] = {
    ConversationState.UNREAD: "unread",
    ConversationState.OPENED: "open",
    ConversationState.CLOSED: "closed",
    ConversationState.SNOOZED: "snoozed",
    ConversationState.SPAM: "spam",
    ConversationState.DELETED: "deleted",
}


def state_to_wire(state: ConversationState) -> str:
    """Return the API enum name for a state (e.g. ``OPENED``)."""
    return _STATE_WIRE_NAMES[state]


def state_to_display(state: ConversationState) -> str:
    """Return the short lowercase name shown to users (e.g. ``open``)."""
    return _STATE_DISPLAY_NAMES[state]


def state_filter_value(value: str) -> str:
    """Translate a user-supplied state filter to the wire enum name.

    Accepts display names ("open") and wire names ("opened", "OPENED").
    Anything else is upper-cased and passed through for the API to judge.
    """
    needle = value.strip().lower()
    for state, display in _STATE_DISPLAY_NAMES.items():
        if needle == display or needle == _STATE_WIRE_NAMES[state].lower():
            return _STATE_WIRE_NAMES[state]
    return value.strip().upper()


# ---------------------------------------------------------------------------
# People and labels
# ---------------------------------------------------------------------------


class Agent(GrooveModel):
    """A helpdesk agent. ``role`` is only populated for the ``me`` query."""

    id: str
    email: str
    name: str | None = None
    role: str | None = None


class Contact(GrooveModel):
    """A customer. Either or both of email/name may be missing."""

    id: str
    email: str | None = None
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.email or self.name or "unknown"


class Channel(GrooveModel):
    id: str
    name: str | None = None


class Tag(GrooveModel):
    id: str
    name: str
    color: str | None = None


class Folder(GrooveModel):
    id: str
    name: str
    count: int | None = None


class CannedReply(GrooveModel):
    id: str
    name: str
    subject: str | None = None
    body: str | None = None


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class AuthorKind(StrEnum):
    AGENT = "Agent"
    CONTACT = "Contact"
    UNKNOWN = "Unknown"


class MessageAuthor(GrooveModel):
    """Author of a message: an Agent, a Contact, or something unrecognised.

    The API returns a union discriminated by ``__typename``. Unknown or
    missing type names decode to ``AuthorKind.UNKNOWN`` and keep whatever
    identifying fields were present.
    """

    kind: AuthorKind = AuthorKind.UNKNOWN
    typename: str | None = Field(default=None, alias="__typename")
    id: str | None = None
    email: str | None = None
    name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _discriminate(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        typename = data.get("__typename")
        if typename == "Agent":
            data["kind"] = AuthorKind.AGENT
        elif typename == "Contact":
            data["kind"] = AuthorKind.CONTACT
        else:
            data["kind"] = AuthorKind.UNKNOWN
        return data

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Unknown"


class Message(GrooveModel):
    id: str
    created_at: datetime
    body_text: str | None = None
    body_html: str | None = None
    author: MessageAuthor | None = None


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------


class Conversation(GrooveModel):
    """A conversation snapshot.

    ``number`` is what humans type; ``id`` is what mutations need.
    """

    id: str
    number: int
    subject: str | None = None
    state: ConversationState
    created_at: datetime
    updated_at: datetime
    snoozed_until: datetime | None = None
    messages_count: int | None = None
    assigned: Agent | None = None
    contact: Contact | None = None
    channel: Channel | None = None
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("assigned", mode="before")
    @classmethod
    def _unwrap_assignment(cls, value: Any) -> Any:
        # Either the agent itself, an {agent: {...}} wrapper, or {} for a
        # non-agent member of the assignee union.
        if isinstance(value, dict):
            if "agent" in value:
                return value["agent"]
            if "id" not in value:
                return None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _unwrap_tag_connection(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            return value.get("nodes") or []
        return value


class PageInfo(GrooveModel):
    has_next_page: bool
    end_cursor: str | None = None


class ConversationPage(GrooveModel):
    """One page of a conversation listing."""

    nodes: list[Conversation]
    page_info: PageInfo
    total_count: int
