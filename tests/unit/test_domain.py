from __future__ import annotations

from chat_sync.application.dto.session import SessionContext
from chat_sync.application.policies.consistency import find_summary_drift
from chat_sync.application.policies.read_receipts import unread_from_others
from chat_sync.domain.entities.conversation import Conversation, ConversationSummary
from tests.conftest import make_identity, make_message


def test_identity_completeness():
    assert make_identity("t1").is_complete is True
    assert make_identity("").is_complete is False
    assert make_identity("t1", preferred_name="").is_complete is False
    assert make_identity("t1", first_name="").is_complete is False
    assert make_identity("t1", last_name="").is_complete is False
    assert make_identity("t1", profile_picture_url="").is_complete is True


def test_latest_message_uses_timestamp_not_position():
    conversation = Conversation(
        "c1",
        messages=(make_message("b", timestamp=20), make_message("a", timestamp=10)),
    )

    assert conversation.latest_message.message_id == "b"
    assert Conversation("c2").latest_message is None


def test_session_context_user_id():
    assert SessionContext().user_id is None
    assert SessionContext(make_identity("")).user_id is None
    assert SessionContext(make_identity("t1")).user_id == "t1"


def test_unread_from_others_keeps_order():
    messages = [
        make_message("1", sender_id="t2"),
        make_message("2", sender_id="t1"),
        make_message("3", sender_id="t3"),
    ]

    assert unread_from_others(messages, "t1") == ["1", "3"]


def test_summary_drift_detection():
    stored = {
        "a": Conversation("a", messages=(make_message("a2", conversation_id="a", timestamp=200),)),
        "b": Conversation("b", messages=(make_message("b1", conversation_id="b", timestamp=100),)),
        "c": Conversation("c"),
    }
    summaries = [
        ConversationSummary("a", (), make_message("a1", conversation_id="a", timestamp=100)),
        ConversationSummary("b", (), make_message("b1", conversation_id="b", timestamp=100)),
        ConversationSummary("c", (), None),
        ConversationSummary("d", (), None),
    ]

    assert find_summary_drift(summaries, stored) == ["a"]
