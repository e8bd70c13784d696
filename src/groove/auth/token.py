"""API token resolution.

The token comes from the first non-empty source, in this order:

1. ``--token`` flag
2. ``GROOVEHQ_API_TOKEN`` environment variable
3. ``api_token`` in the config file

The sources are plain callables so the chain can be tested without touching
the real environment or filesystem.
"""

import os
from collections.abc import Callable, Iterable, Mapping

from groove.config_schema import GrooveConfig
from groove.core.errors import TokenNotFound
from groove.core.logging import get_logger

logger = get_logger(__name__)

TOKEN_ENV_VAR = "GROOVEHQ_API_TOKEN"

TokenSource = Callable[[], str | None]


def first_non_empty(sources: Iterable[tuple[str, TokenSource]]) -> tuple[str, str] | None:
    """Return ``(source_name, token)`` from the first source yielding a non-empty token."""
    for name, source in sources:
        token = source()
        if token:
            return name, token
    return None


def token_sources(
    cli_token: str | None,
    config: GrooveConfig,
    environ: Mapping[str, str] | None = None,
) -> list[tuple[str, TokenSource]]:
    """Build the ordered token sources: flag, environment, config file."""
    env = os.environ if environ is None else environ
    return [
        ("flag", lambda: cli_token),
        ("environment", lambda: env.get(TOKEN_ENV_VAR)),
        ("config", lambda: config.api_token),
    ]


def resolve_token(
    cli_token: str | None,
    config: GrooveConfig,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Resolve the API token.

    Raises:
        TokenNotFound: If no source provides a token
    """
    found = first_non_empty(token_sources(cli_token, config, environ))
    if found is None:
        raise TokenNotFound()

    source, token = found
    logger.debug("API token resolved", source=source)
    return token
