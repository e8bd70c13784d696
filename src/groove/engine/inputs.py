"""Semantic validation of command arguments.

Everything here is pure (or reads only an injected stream) and runs before
any network call, so bad input never costs a round-trip.
"""

import re
import sys
from datetime import UTC, datetime, timedelta
from typing import TextIO

from groove.core.errors import InvalidInputError

# "2024-12-25", "2024-12-25T10:00:00Z" ...
_DATE_PREFIX = re.compile(r"^\d{4}-")

_DURATION_UNITS: dict[str, str] = {
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def validate_conversation_number(number: int) -> int:
    """Reject zero and negative conversation numbers.

    Raises:
        InvalidInputError: If number is not strictly positive
    """
    if number <= 0:
        raise InvalidInputError(
            f"Invalid conversation number: {number}. Conversation numbers must be positive"
        )
    return number


def validate_conversation_numbers(numbers: list[int] | tuple[int, ...]) -> list[int]:
    """Validate every number of a batch, in order, before any of them is used."""
    if not numbers:
        raise InvalidInputError("At least one conversation number is required")
    return [validate_conversation_number(n) for n in numbers]


def parse_snooze_until(value: str, now: datetime | None = None) -> str:
    """Turn a snooze argument into an RFC3339 timestamp.

    Absolute timestamps (anything containing ``T`` or starting with a
    4-digit year and a dash) pass through unchanged. Otherwise the value
    must be ``<positive integer><unit>`` with unit one of m, h, d, w.

    Args:
        value: e.g. "30m", "2h", "5d", "1w", "2024-12-25T10:00:00Z"
        now: Reference instant (default: current UTC time)

    Returns:
        RFC3339 timestamp string

    Raises:
        InvalidInputError: If the value cannot be parsed or is not positive
    """
    value = value.strip()

    if "T" in value or _DATE_PREFIX.match(value):
        return value

    if len(value) < 2:
        raise InvalidInputError(f"Invalid duration: '{value}'. Use e.g. 30m, 2h, 5d or 1w")

    magnitude_text, unit = value[:-1], value[-1]

    if unit not in _DURATION_UNITS:
        raise InvalidInputError(f"Invalid duration unit: '{unit}'. Use m, h, d, or w")

    try:
        magnitude = int(magnitude_text)
    except ValueError:
        raise InvalidInputError(f"Invalid duration number: '{magnitude_text}'") from None

    if magnitude <= 0:
        raise InvalidInputError(f"Invalid duration: '{value}'. Duration must be positive")

    reference = now or datetime.now(UTC)
    try:
        until = reference + timedelta(**{_DURATION_UNITS[unit]: magnitude})
    except (OverflowError, ValueError):
        raise InvalidInputError(f"Invalid duration: '{value}'. Duration is too large") from None
    return until.isoformat(timespec="seconds")


def resolve_body(body: str | None, stdin: TextIO | None = None) -> str:
    """Pick the message body for reply/note.

    An explicit argument wins. Otherwise piped input is read in full; an
    interactive terminal is refused rather than waited on.

    Args:
        body: Body given on the command line, if any
        stdin: Input stream (default: sys.stdin)

    Raises:
        InvalidInputError: No body available, or piped input is blank
    """
    if body is not None:
        return body

    stream = stdin if stdin is not None else sys.stdin

    if stream is None or stream.isatty():
        raise InvalidInputError("No body provided. Pass as argument or pipe content via stdin")

    content = stream.read()
    if not content.strip():
        raise InvalidInputError("Empty body provided")

    return content
