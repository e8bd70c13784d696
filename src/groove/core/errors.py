"""Exception types for the Groove CLI.

Every failure a command can hit is one of the classes below. They are all
terminal for the current command: nothing here is retried automatically.
The CLI prints the message on one line and exits non-zero.
"""


class GrooveError(Exception):
    """Base exception for all Groove CLI errors."""

    pass


class AuthError(GrooveError):
    """Raised when the API rejects the token (HTTP 401)."""

    def __init__(self, detail: str = "Invalid or expired token"):
        super().__init__(f"Authentication failed: {detail}")
        self.detail = detail


class TokenNotFound(GrooveError):
    """Raised when no API token is available from flag, env or config."""

    def __init__(self):
        super().__init__(
            "API token not found. Set GROOVEHQ_API_TOKEN or run 'groove config set-token'"
        )


class ConversationNotFound(GrooveError):
    """Raised when no conversation exists for a human-facing number.

    Attributes:
        number: The conversation number that was looked up
    """

    def __init__(self, number: int):
        super().__init__(f"Conversation #{number} not found")
        self.number = number


class TagNotFound(GrooveError):
    """Raised when a tag name matches no tag in the account."""

    def __init__(self, name: str):
        super().__init__(f"Tag '{name}' not found")
        self.name = name


class AgentNotFound(GrooveError):
    """Raised when an email or name matches no agent."""

    def __init__(self, identifier: str):
        super().__init__(f"Agent '{identifier}' not found")
        self.identifier = identifier


class CannedReplyNotFound(GrooveError):
    """Raised when a canned reply name or ID matches nothing."""

    def __init__(self, identifier: str):
        super().__init__(f"Canned reply '{identifier}' not found")
        self.identifier = identifier


class GraphQLError(GrooveError):
    """Raised when the response carries GraphQL errors or no data.

    Also used for the per-mutation ``errors`` list of a payload.

    Attributes:
        detail: The joined error messages from the API
    """

    def __init__(self, detail: str):
        super().__init__(f"GraphQL error: {detail}")
        self.detail = detail


class RateLimited(GrooveError):
    """Raised on HTTP 429.

    ``retry_after`` is informational only; the client never sleeps on it.

    Attributes:
        retry_after: Seconds from the Retry-After header, if numeric
    """

    def __init__(self, retry_after: int | None = None):
        if retry_after is not None:
            message = f"Rate limited. Retry after {retry_after} seconds"
        else:
            message = "Rate limited. Please wait and try again"
        super().__init__(message)
        self.retry_after = retry_after


class NetworkError(GrooveError):
    """Raised when the request never produced an HTTP response (DNS, TLS, timeout)."""

    def __init__(self, detail: str):
        super().__init__(f"Network error: {detail}")
        self.detail = detail


class ConfigError(GrooveError):
    """Raised when the config file cannot be read, parsed, validated or written."""

    def __init__(self, detail: str):
        super().__init__(f"Configuration error: {detail}")
        self.detail = detail


class ResponseDecodeError(GrooveError):
    """Raised when a response body is not JSON or does not fit the expected shape."""

    def __init__(self, detail: str):
        super().__init__(f"Could not decode API response: {detail}")
        self.detail = detail


class InvalidInputError(GrooveError):
    """Raised when a command argument fails semantic validation.

    Always raised before any network call is made.
    """

    pass
