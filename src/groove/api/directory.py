"""Account-level lookups: the current agent and the list-all collections.

Folders, tags, canned replies and agents are each fetched with a single
request capped at ``LIST_ALL_PAGE_SIZE`` items. Nothing past the cap is
fetched; when a result reaches the cap a warning is logged because the
list may be incomplete.

Usage:
    from groove.api.directory import DirectoryManager

    directory = DirectoryManager(client)
    me = directory.me()
    tags = directory.list_tags()
"""

from typing import TYPE_CHECKING, Any

from groove.api import queries
from groove.api.client import ModelT, decode
from groove.api.models import Agent, CannedReply, Folder, Tag
from groove.core.logging import get_logger

if TYPE_CHECKING:
    from groove.api.client import GrooveClient

logger = get_logger(__name__)


class DirectoryManager:
    """Read-only account lookups over a GrooveClient.

    Attributes:
        client: GrooveClient instance for API calls
        page_size: Cap applied server-side to each list-all query
    """

    def __init__(self, client: "GrooveClient", page_size: int = queries.LIST_ALL_PAGE_SIZE):
        self.client = client
        self.page_size = page_size

    def me(self) -> Agent:
        """Return the authenticated agent."""
        data = self.client.execute(queries.ME)
        return decode(Agent, data.get("me"), "me")

    def list_folders(self) -> list[Folder]:
        return self._list_all(queries.FOLDERS, "folders", Folder)

    def list_tags(self) -> list[Tag]:
        return self._list_all(queries.TAGS, "tags", Tag)

    def list_canned_replies(self) -> list[CannedReply]:
        return self._list_all(queries.CANNED_REPLIES, "cannedReplies", CannedReply)

    def list_agents(self) -> list[Agent]:
        return self._list_all(queries.AGENTS, "agents", Agent)

    def _list_all(self, query: str, field: str, model: type[ModelT]) -> list[ModelT]:
        """Run a list-all query and decode its ``nodes``.

        Args:
            query: GraphQL document
            field: Connection field in ``data`` (e.g. "tags")
            model: Model for each node

        Returns:
            Decoded nodes, at most ``page_size`` of them
        """
        data = self.client.execute(query)
        connection: dict[str, Any] = data.get(field) or {}
        nodes = connection.get("nodes") or []

        items = [decode(model, raw, field) for raw in nodes]

        if len(items) >= self.page_size:
            logger.warning(
                "list_possibly_truncated",
                collection=field,
                limit=self.page_size,
                returned=len(items),
            )

        logger.debug("collection_listed", collection=field, count=len(items))
        return items
