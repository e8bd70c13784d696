"""Tests for structured logging setup."""

import json
import logging
from collections.abc import Generator

import pytest

from groove.core.logging import (
    add_invocation_id,
    configure_logging,
    get_invocation_id,
    get_logger,
    set_invocation_id,
)


@pytest.fixture(autouse=True)
def clear_invocation_id() -> Generator[None, None, None]:
    set_invocation_id(None)
    yield
    set_invocation_id(None)


class TestInvocationId:
    """Tests for the invocation ID processor."""

    def test_added_when_set(self) -> None:
        set_invocation_id("ab12cd34")

        event = add_invocation_id(None, "info", {"event": "graphql_request"})

        assert get_invocation_id() == "ab12cd34"
        assert event["invocation_id"] == "ab12cd34"

    def test_absent_when_unset(self) -> None:
        event = add_invocation_id(None, "info", {"event": "graphql_request"})

        assert "invocation_id" not in event


class TestConfigureLogging:
    """Tests for level selection."""

    @pytest.mark.parametrize("level", ["DEBUG", "WARNING", "info"])
    def test_sets_root_level(self, level: str) -> None:
        configure_logging(log_level=level)

        assert logging.getLogger().level == getattr(logging, level.upper())

    def test_logs_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_level="WARNING")

        get_logger("groove.test").warning("something_odd", count=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "something_odd" in captured.err

    def test_json_renderer(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_level="WARNING", json_output=True)

        get_logger("groove.test").warning("something_odd", count=3)

        entry = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert entry["event"] == "something_odd"
        assert entry["count"] == 3
