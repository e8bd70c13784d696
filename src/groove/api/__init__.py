"""Groove GraphQL API module.

Provides the transport executor and the operation catalog:
- GrooveClient: sends one GraphQL document, maps HTTP/GraphQL failures to errors
- ConversationManager: conversation queries and mutations
- DirectoryManager: current agent and list-all lookups (tags, folders, ...)

Usage:
    from groove.api import ConversationManager, DirectoryManager, GrooveClient

    client = GrooveClient(token)
    conversations = ConversationManager(client)
    directory = DirectoryManager(client)
"""

from groove.api.client import GrooveClient
from groove.api.conversations import ConversationManager
from groove.api.directory import DirectoryManager

__all__ = [
    "GrooveClient",
    "ConversationManager",
    "DirectoryManager",
]
