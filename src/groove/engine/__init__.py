"""Command engine: input validation, identifier resolution and orchestration.

Usage:
    from groove.engine import CommandOrchestrator

    orchestrator = CommandOrchestrator(client)
    orchestrator.add_tags(123, ["urgent"])
"""

from groove.engine.orchestrator import CommandOrchestrator, ConversationDetail
from groove.engine.resolver import IdentifierResolver, compose_canned_body

__all__ = [
    "CommandOrchestrator",
    "ConversationDetail",
    "IdentifierResolver",
    "compose_canned_body",
]
