"""Tests for structured logging helpers."""

import logging

import pytest

from momentum.core import logging as momentum_logging
from momentum.core.config import settings


logger = logging.getLogger("momentum.tests")


@pytest.mark.unit
def test_context_fields_become_record_attributes(caplog) -> None:
    """Test context fields land on the log record."""
    with caplog.at_level(logging.INFO, logger="momentum.tests"):
        momentum_logging.log_with_context(logger, "INFO", "Streak extended", streak_id="s1", count=4)

    record = caplog.records[-1]
    assert record.getMessage() == "Streak extended"
    assert (record.streak_id, record.count) == ("s1", 4)


@pytest.mark.unit
def test_user_id_is_attached_only_when_present(caplog) -> None:
    """Test the user id is only attached when one is given."""
    with caplog.at_level(logging.INFO, logger="momentum.tests"):
        momentum_logging.log_with_user_context(logger, "info", "Day closed", user_id="u1", streak=2)
        momentum_logging.log_with_user_context(logger, "info", "Day closed", streak=2)

    tagged, anonymous = caplog.records[-2:]
    assert tagged.user_id == "u1"
    assert not hasattr(anonymous, "user_id")


@pytest.mark.unit
def test_unknown_level_raises() -> None:
    """Test an unknown level name is rejected."""
    with pytest.raises(ValueError, match="Unknown log level"):
        momentum_logging.log_with_context(logger, "loud", "nope")


@pytest.mark.unit
def test_configure_without_token_keeps_spans_local(monkeypatch, caplog) -> None:
    """Test configuring without a token keeps spans local."""
    monkeypatch.setattr(settings, "logfire_token", None)

    with caplog.at_level(logging.INFO, logger="momentum.core.logging"):
        momentum_logging.configure_logfire(console=False)

    record = caplog.records[-1]
    assert record.getMessage() == "Logfire configured"
    assert record.export is False

    with momentum_logging.span("logging_test.span"):
        pass
