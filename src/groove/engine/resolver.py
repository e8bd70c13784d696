"""Resolution of human-friendly identifiers into API IDs.

Mutations only accept opaque IDs. Users type tag names, agent emails,
canned-reply names and folder names. ``IdentifierResolver`` fetches the
relevant collection and maps names to IDs:

- Tags: case-insensitive exact name match, all-or-nothing
- Agents: "me" short-circuits to the current agent; otherwise exact email
  or name, first match wins
- Canned replies: case-insensitive name or exact ID
- Folders: exact ID, then case-insensitive name, else passed through

Usage:
    resolver = IdentifierResolver(DirectoryManager(client))
    tag_ids = resolver.resolve_tag_ids(["urgent", "billing"])
"""

from typing import TYPE_CHECKING

from groove.api.models import CannedReply
from groove.core.errors import AgentNotFound, CannedReplyNotFound, TagNotFound
from groove.core.logging import get_logger

if TYPE_CHECKING:
    from groove.api.directory import DirectoryManager

logger = get_logger(__name__)

SELF_ASSIGNEE = "me"


def compose_canned_body(reply: CannedReply, extra_text: str | None = None) -> str:
    """Merge a canned reply body with optional free text.

    The canned body comes first, then a blank line, then the free text.
    An empty canned body is allowed and yields an empty string on its own.
    """
    canned_body = reply.body or ""
    if extra_text is None:
        return canned_body
    return f"{canned_body}\n\n{extra_text}"


class IdentifierResolver:
    """Maps user-supplied names to IDs using fresh directory lookups.

    Attributes:
        directory: DirectoryManager used for the lookups
    """

    def __init__(self, directory: "DirectoryManager"):
        self.directory = directory

    def resolve_tag_ids(self, names: list[str]) -> list[str]:
        """Resolve tag names to IDs, in the order given.

        Either every name resolves or none do: the first unknown name
        raises and no IDs are returned.

        Raises:
            TagNotFound: For the first name with no matching tag
        """
        all_tags = self.directory.list_tags()
        by_name = {}
        for tag in all_tags:
            by_name.setdefault(tag.name.casefold(), tag)

        tag_ids = []
        for name in names:
            tag = by_name.get(name.casefold())
            if tag is None:
                raise TagNotFound(name)
            tag_ids.append(tag.id)

        logger.debug("tags_resolved", requested=len(names), resolved=len(tag_ids))
        return tag_ids

    def resolve_agent_id(self, identifier: str) -> str:
        """Resolve an assignee to an agent ID.

        ``"me"`` uses the current agent without listing all agents.

        Raises:
            AgentNotFound: If no agent has that email or name
        """
        if identifier == SELF_ASSIGNEE:
            return self.directory.me().id

        for agent in self.directory.list_agents():
            if agent.email == identifier or agent.name == identifier:
                return agent.id

        raise AgentNotFound(identifier)

    def find_canned_reply(self, identifier: str) -> CannedReply:
        """Find a canned reply by case-insensitive name or exact ID.

        Raises:
            CannedReplyNotFound: If nothing matches
        """
        needle = identifier.casefold()
        for reply in self.directory.list_canned_replies():
            if reply.name.casefold() == needle or reply.id == identifier:
                return reply

        raise CannedReplyNotFound(identifier)

    def resolve_folder_id(self, value: str) -> str:
        """Resolve a folder name or ID to a folder ID.

        Exact ID matches win over name matches. A value that matches no
        folder is returned unchanged and left for the API to reject.
        """
        folders = self.directory.list_folders()

        for folder in folders:
            if folder.id == value:
                return folder.id

        needle = value.casefold()
        for folder in folders:
            if folder.name.casefold() == needle:
                return folder.id

        logger.debug("folder_unresolved", folder=value)
        return value
