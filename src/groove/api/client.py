"""Transport executor for the Groove GraphQL API.

Sends one GraphQL document per call and turns the HTTP/GraphQL outcome into
either the ``data`` payload or one of the typed errors from
``groove.core.errors``. Nothing is retried here: a rate limit,
an auth failure or a GraphQL error goes straight back to the caller.

Usage:
    from groove.api.client import GrooveClient
    from groove.api import queries

    client = GrooveClient(token)
    data = client.execute(queries.ME)
    print(data["me"]["email"])
"""

from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from groove.api.queries import operation_name
from groove.core.errors import (
    AuthError,
    GraphQLError,
    NetworkError,
    RateLimited,
    ResponseDecodeError,
)
from groove.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://api.groovehq.com/v2/graphql"

# Overall per-request deadline in seconds
REQUEST_TIMEOUT_SECONDS = 30.0

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_retry_after(value: str | None) -> int | None:
    """Return the Retry-After header as whole seconds, or None if absent/non-numeric."""
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdecimal()):
        return None
    return int(value)


def _join_error_messages(errors: list[Any]) -> str:
    messages = []
    for error in errors:
        if isinstance(error, dict):
            messages.append(str(error.get("message", error)))
        else:
            messages.append(str(error))
    return "; ".join(messages)


def decode(model: type[ModelT], payload: Any, context: str) -> ModelT:
    """Validate a response fragment against a model.

    Raises:
        ResponseDecodeError: If the fragment does not fit the model
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ResponseDecodeError(f"unexpected shape for {context}: {e}") from e


class GrooveClient:
    """GraphQL client for the Groove API.

    Attributes:
        endpoint: GraphQL endpoint URL
        timeout: Overall per-request timeout in seconds
        session: requests.Session reused across calls for keep-alive

    Example:
        with GrooveClient(token) as client:
            data = client.execute(queries.CONVERSATION, {"number": 42})
    """

    def __init__(
        self,
        token: str,
        endpoint: str | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        """Initialize the client.

        Args:
            token: API bearer token
            endpoint: GraphQL endpoint (default: the public Groove endpoint)
            timeout: Overall per-request timeout in seconds
        """
        self._token = token
        self.endpoint = endpoint or DEFAULT_ENDPOINT
        self.timeout = timeout
        self.session = requests.Session()

        logger.debug("GrooveClient initialized", endpoint=self.endpoint)

    def __enter__(self) -> "GrooveClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """POST a GraphQL document and return its ``data`` object.

        Outcomes are checked in this order: 429, 401, top-level ``errors``,
        missing ``data``.

        Args:
            query: GraphQL query or mutation document
            variables: Variables object (sent as ``{}`` when None)

        Returns:
            The ``data`` object of the response

        Raises:
            RateLimited: HTTP 429, with Retry-After seconds if numeric
            AuthError: HTTP 401
            GraphQLError: Non-empty ``errors`` or null ``data``
            NetworkError: Connection failure or timeout
            ResponseDecodeError: Body is not a JSON object
        """
        operation = operation_name(query)
        body = {"query": query, "variables": variables or {}}

        logger.debug(
            "graphql_request",
            operation=operation,
            variables=sorted(body["variables"].keys()),
        )

        try:
            response = self.session.post(
                self.endpoint,
                json=body,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.debug("graphql_timeout", operation=operation, timeout=self.timeout)
            raise NetworkError(
                f"request to {self.endpoint} timed out after {self.timeout:g}s"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.debug("graphql_connection_failed", operation=operation, error=str(e))
            raise NetworkError(str(e)) from e

        status = response.status_code

        if status == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            logger.warning("graphql_rate_limited", operation=operation, retry_after=retry_after)
            raise RateLimited(retry_after)

        if status == 401:
            logger.debug("graphql_unauthorized", operation=operation)
            raise AuthError()

        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseDecodeError(f"HTTP {status} response body is not JSON") from e

        if not isinstance(payload, dict):
            raise ResponseDecodeError(
                f"HTTP {status} response body is a JSON {type(payload).__name__}, "
                "expected an object"
            )

        errors = payload.get("errors") or []
        if errors:
            message = _join_error_messages(errors)
            logger.debug(
                "graphql_errors",
                operation=operation,
                status_code=status,
                error_count=len(errors),
            )
            raise GraphQLError(message)

        data = payload.get("data")
        if data is None:
            raise GraphQLError("No data in response")

        logger.debug("graphql_response", operation=operation, status_code=status)
        return data

    def mutate(self, mutation: str, field: str, input_data: dict[str, Any]) -> None:
        """Run a mutation and check its payload-level ``errors`` list.

        The payload errors are separate from the top-level GraphQL errors and
        are checked even when the request itself succeeded.

        Args:
            mutation: Mutation document
            field: Name of the mutation field in ``data`` (e.g. "conversationClose")
            input_data: The ``input`` variable

        Raises:
            GraphQLError: If the payload is missing or its errors list is non-empty
        """
        data = self.execute(mutation, {"input": input_data})

        result = data.get(field)
        if not isinstance(result, dict):
            raise GraphQLError(f"No result returned for {field}")

        errors = result.get("errors") or []
        if errors:
            raise GraphQLError(_join_error_messages(errors))

        logger.info("mutation_applied", mutation=field)
