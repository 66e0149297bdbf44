"""Tests for shape validation and payload parsing."""
import pytest

from chat_relay.validators import (
    is_valid_username,
    is_valid_room_id,
    is_valid_message,
    validate_event_payload,
)
from chat_relay.models import JoinRoomRequest, SendMessageRequest, TypingRequest, LeaveRoomRequest


@pytest.mark.parametrize("username,expected", [
    ("al", True),
    ("a" * 20, True),
    ("  bob  ", True),
    ("a", False),
    ("a" * 21, False),
    ("   a   ", False),
    ("", False),
    (None, False),
    (42, False),
])
def test_username_bounds(username, expected):
    assert is_valid_username(username) is expected


def test_room_bounds():
    assert is_valid_room_id("lobby")
    assert is_valid_room_id("r" * 20)
    assert not is_valid_room_id("r" * 21)
    assert not is_valid_room_id(" x ")
    assert not is_valid_room_id(["lobby"])


def test_message_bounds():
    assert is_valid_message("hi")
    assert is_valid_message("x" * 500)
    assert not is_valid_message("x" * 501)
    assert not is_valid_message("   ")
    assert not is_valid_message("")
    assert not is_valid_message(None)


def test_message_length_counts_raw_text():
    # 498 visible characters padded past the limit with whitespace
    assert not is_valid_message(" " * 3 + "x" * 498)


def test_parse_join():
    ok, error_key, request = validate_event_payload("join_room", {"room": "lobby", "username": "alice"})
    assert ok and error_key == ""
    assert request == JoinRoomRequest(room="lobby", username="alice")


def test_parse_send_message():
    ok, _, request = validate_event_payload(
        "send_message", {"room": "lobby", "author": "bob", "message": "hi"}
    )
    assert ok
    assert request == SendMessageRequest(room="lobby", author="bob", message="hi")


def test_parse_typing_requires_boolean_flag():
    ok, _, request = validate_event_payload("typing", {"room": "lobby", "username": "bob", "isTyping": True})
    assert ok
    assert request == TypingRequest(room="lobby", username="bob", is_typing=True)

    ok, error_key, request = validate_event_payload("typing", {"room": "lobby", "username": "bob", "isTyping": "yes"})
    assert not ok
    assert error_key == "invalid_payload"
    assert request is None


def test_parse_leave_ignores_payload():
    ok, _, request = validate_event_payload("leave_room", None)
    assert ok
    assert isinstance(request, LeaveRoomRequest)


@pytest.mark.parametrize("data", [
    None,
    "lobby",
    [],
    {"room": "lobby"},
    {"room": "lobby", "username": 7},
])
def test_malformed_join_payloads(data):
    ok, error_key, request = validate_event_payload("join_room", data)
    assert not ok
    assert error_key == "invalid_payload"
    assert request is None


def test_unknown_event():
    ok, error_key, _ = validate_event_payload("list_topics", {})
    assert not ok
    assert error_key == "unknown_event"
