from __future__ import annotations

import pytest

from chat_sync.application.exceptions import ProtocolError
from chat_sync.infrastructure.channel.mappers import (
    identity_to_payload,
    parse_conversation,
    parse_messages_list,
    parse_user_registered,
)
from tests.conftest import chat_wire, make_identity, message_wire, messages_list_wire, user_wire


def test_identity_payload_uses_wire_keys():
    payload = identity_to_payload(make_identity("t1", profile_picture_url="http://img")).to_wire()

    assert payload == {
        "userId": "t1",
        "userType": "teacher",
        "preferredName": "A",
        "firstName": "B",
        "lastName": "C",
        "profilePictureUrl": "http://img",
    }


def test_parse_messages_list():
    conversation = parse_messages_list(
        messages_list_wire("c1", [message_wire("m1", sender_id="t2", timestamp=42, is_read=True)])
    )

    assert conversation.conversation_id == "c1"
    [message] = conversation.messages
    assert message.message_id == "m1"
    assert message.conversation_id == "c1"
    assert message.sender.user_id == "t2"
    assert message.timestamp == 42
    assert message.is_read is True
    assert message.is_deleted is False


def test_participants_collapse_by_user_id():
    payload = chat_wire("c1", [])
    payload["participants"].append(user_wire("t1", preferredName="Dup"))

    conversation = parse_conversation(payload)

    assert [p.user_id for p in conversation.participants] == ["t1", "t2"]
    assert conversation.participants[0].preferred_name == "A"


def test_unknown_fields_are_ignored():
    payload = chat_wire("c1", [message_wire("m1")])
    payload["unread"] = 3
    payload["messages"][0]["reactions"] = []

    assert parse_conversation(payload).messages[0].message_id == "m1"


def test_missing_fields_raise_protocol_error():
    with pytest.raises(ProtocolError):
        parse_conversation({"participants": []})
    with pytest.raises(ProtocolError):
        parse_messages_list(messages_list_wire("c1", [{"messageId": "m1"}]))
    with pytest.raises(ProtocolError):
        parse_user_registered({})


def test_parse_user_registered():
    assert parse_user_registered({"userId": "t1"}) == "t1"
