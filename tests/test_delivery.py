from unittest.mock import MagicMock

import pytest
from firebase_admin import messaging

import notification_builder as nb
from delivery import (
    REASON_BUILD_FAILED, REASON_DELIVERY_FAILED, REASON_INVALID_RECIPIENT, REASON_NO_TOKEN,
    REASON_PERSISTENCE_FAILED, REASON_UNREGISTERED, DeliveryOrchestrator, PushClient,
)
from exceptions import PersistenceError
from models import Recipient


def test_build_message_uses_the_default_channel():
    client = PushClient(channel_id="dynamic", streak_channel_id="streaks", color="#4CAF50")
    message = client.build_message("token-1", nb.build_rank_up("a", "b"))
    assert message.token == "token-1"
    assert message.notification.title == "Rank Up! 🎖️"
    assert message.data["category"] == nb.CATEGORY_MILESTONE
    assert message.android.priority == "high"
    assert message.android.notification.channel_id == "dynamic"


def test_build_message_routes_streak_reminders_to_the_streak_channel():
    client = PushClient(channel_id="dynamic", streak_channel_id="streaks")
    message = client.build_message("token-1", nb.build_streak_warning(4))
    assert message.android.notification.channel_id == "streaks"


def test_deliver_persists_then_pushes(services, db, push_client):
    outcome = services.delivery.deliver("u1", nb.build_streak_milestone(7), "token-1")

    assert outcome.ok and outcome.pushed and outcome.reason is None
    stored = list(db.docs("notifications").values())
    assert len(stored) == 1
    assert stored[0]["userId"] == "u1"
    assert stored[0]["read"] is False
    assert stored[0]["createdAt"] == "2025-11-09T12:00:00+00:00"
    push_client.send.assert_called_once()


def test_deliver_without_token_still_persists(services, db, push_client):
    outcome = services.delivery.deliver("u1", nb.build_daily_challenge_reminder(), None)

    assert outcome.persisted and not outcome.pushed
    assert outcome.reason == REASON_NO_TOKEN
    assert len(db.docs("notifications")) == 1
    push_client.send.assert_not_called()


@pytest.mark.parametrize("error, reason", [
    (messaging.UnregisteredError("token no longer registered"), REASON_UNREGISTERED),
    (ValueError("bad token"), REASON_INVALID_RECIPIENT),
    (RuntimeError("FCM down"), REASON_DELIVERY_FAILED),
])
def test_push_failures_are_reported_not_raised(services, push_client, error, reason):
    push_client.send.side_effect = error
    outcome = services.delivery.deliver("u1", nb.build_daily_challenge_reminder(), "token-1")
    assert outcome.persisted
    assert not outcome.pushed
    assert outcome.reason == reason


def test_persistence_failure_raises_and_skips_push(services, db, push_client):
    db.fail_add_for.add("u1")
    with pytest.raises(PersistenceError) as exc_info:
        services.delivery.deliver("u1", nb.build_daily_challenge_reminder(), "token-1")
    assert exc_info.value.user_id == "u1"
    push_client.send.assert_not_called()


def test_fan_out_isolates_failures(services, db, push_client):
    recipients = [Recipient(userId=f"u{i}", fcmToken=f"token-{i}") for i in range(6)]

    def send(token, content):
        if token == "token-2":
            raise RuntimeError("FCM down")
        return f"msg-{token}"

    push_client.send.side_effect = send
    db.fail_add_for.add("u4")

    def build(recipient):
        if recipient.userId == "u5":
            raise KeyError("missing template value")
        return nb.build_daily_challenge_reminder()

    outcomes = services.delivery.fan_out(recipients, build)
    by_user = {o.userId: o for o in outcomes}

    assert [o.userId for o in outcomes] == ["u0", "u1", "u2", "u3", "u4", "u5"]
    assert by_user["u0"].pushed and by_user["u1"].pushed and by_user["u3"].pushed
    assert by_user["u2"].persisted and by_user["u2"].reason == REASON_DELIVERY_FAILED
    assert not by_user["u4"].persisted and by_user["u4"].reason == REASON_PERSISTENCE_FAILED
    assert not by_user["u5"].persisted and by_user["u5"].reason == REASON_BUILD_FAILED
    assert len(db.docs("notifications")) == 4


def test_fan_out_skips_recipients_without_content(services):
    recipients = [Recipient(userId="u1", fcmToken="t1"), Recipient(userId="u2", fcmToken="t2")]
    outcomes = services.delivery.fan_out(
        recipients, lambda r: None if r.userId == "u1" else nb.build_daily_challenge_reminder()
    )
    assert [o.userId for o in outcomes] == ["u2"]


def test_fan_out_with_no_recipients(services):
    assert services.delivery.fan_out([], lambda r: nb.build_daily_challenge_reminder()) == ()


def test_persist_wraps_client_errors():
    db = MagicMock()
    db.collection.return_value.add.side_effect = RuntimeError("boom")
    orchestrator = DeliveryOrchestrator(db, MagicMock(spec=PushClient))
    with pytest.raises(PersistenceError):
        orchestrator.deliver("u1", nb.build_daily_challenge_reminder(), "token-1")
