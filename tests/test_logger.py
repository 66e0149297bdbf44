"""Tests for the relay's structured log lines."""
import logging

import pytest

from chat_relay.logger import (
    RELAY_LOGGER,
    get_logger,
    log_security_event,
    log_connection_event,
    log_message_event,
    log_system_event,
)


@pytest.fixture
def relay_log(caplog):
    logger = get_logger()
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=RELAY_LOGGER)
    yield caplog
    logger.removeHandler(caplog.handler)


def test_security_event_carries_kind_and_connection(relay_log):
    log_security_event("Unauthorized", "conn1", error="unauthorized", room="lobby")

    [record] = relay_log.records
    assert record.levelno == logging.WARNING
    assert record.getMessage() == "SECURITY_EVENT: Unauthorized | conn=conn1 | error=unauthorized | room=lobby"


def test_internal_fault_logged_as_error(relay_log):
    log_security_event("InternalFault", "conn1", event="join_room", error="RuntimeError")

    [record] = relay_log.records
    assert record.levelno == logging.ERROR


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError) as exc_info:
        log_security_event("Spoofing", "conn1")
    assert "Unknown error kind: Spoofing" in str(exc_info.value)


def test_empty_fields_are_skipped(relay_log):
    log_security_event("Unauthorized", "conn1", bound=None)

    assert relay_log.records[0].getMessage() == "SECURITY_EVENT: Unauthorized | conn=conn1"


def test_connection_and_message_lines(relay_log):
    log_connection_event("join", "conn1", "lobby", "alice")
    log_message_event("broadcast", "0123456789abcdef", "lobby", "alice", 2)
    log_system_event("startup", origins="http://localhost:5173")

    assert [r.getMessage() for r in relay_log.records] == [
        "CONNECTION_EVENT: join | conn=conn1 | room=lobby | user=alice",
        "MESSAGE_EVENT: broadcast | id=01234567 | room=lobby | user=alice | recipients=2",
        "SYSTEM_EVENT: startup | origins=http://localhost:5173",
    ]


def test_logger_is_configured_once():
    first = get_logger()
    second = get_logger()

    assert first is second
    assert len(first.handlers) >= 1
    assert first.propagate is False
