"""Authentication module for the Groove API.

Resolves the bearer token from flag, environment and config file.

Usage:
    from groove.auth import resolve_token

    token = resolve_token(cli_token, config)
"""

from groove.auth.token import resolve_token

__all__ = ["resolve_token"]
