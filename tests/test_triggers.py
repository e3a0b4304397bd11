import pytest

import triggers
from exceptions import MalformedInputError, PersistenceError

from conftest import add_user


def test_streak_jump_reports_one_event_for_the_largest_milestone():
    events = triggers.detect_user_events("u1", {"streak": 4, "ecoPoints": 10}, {"streak": 10, "ecoPoints": 10})
    assert len(events) == 1
    assert events[0].title == "🎉 10-Day Streak!"
    assert events[0].data["streak"] == "10"


def test_independent_metrics_each_produce_an_event():
    before = {"streak": 6, "ecoPoints": 90, "title": "Green Beginner"}
    after = {"streak": 7, "ecoPoints": 120, "title": "Eco Explorer"}
    events = triggers.detect_user_events("u1", before, after)
    assert [e.data["type"] for e in events] == ["streak_milestone", "points_milestone", "rank_up"]


def test_malformed_field_only_suppresses_its_own_detector():
    before = {"streak": "four", "ecoPoints": 240}
    after = {"streak": 10, "ecoPoints": 260}
    events = triggers.detect_user_events("u1", before, after)
    assert len(events) == 1
    assert events[0].data["milestone"] == "250"


def test_no_change_produces_no_events():
    state = {"streak": 5, "ecoPoints": 100, "title": "Green Beginner"}
    assert triggers.detect_user_events("u1", state, dict(state)) == []


def test_handle_user_updated_delivers_with_token_from_after(services, db, push_client):
    outcomes = triggers.handle_user_updated(
        services, "u1",
        {"streak": 29, "ecoPoints": 10, "fcmToken": "token-1"},
        {"streak": 30, "ecoPoints": 10, "fcmToken": "token-1"},
    )
    assert len(outcomes) == 1 and outcomes[0].pushed
    stored = list(db.docs("notifications").values())
    assert stored[0]["title"] == "🏆 1-Month Streak Champion!"
    assert push_client.send.call_args[0][0] == "token-1"


def test_handle_user_updated_propagates_persistence_failure(services, db, push_client):
    db.fail_add_for.add("u1")
    with pytest.raises(PersistenceError):
        triggers.handle_user_updated(
            services, "u1",
            {"streak": 2, "ecoPoints": 90, "fcmToken": "token-1"},
            {"streak": 3, "ecoPoints": 110, "fcmToken": "token-1"},
        )
    push_client.send.assert_not_called()


def test_scan_insight_is_sent_to_the_scanning_user(services, db, push_client):
    add_user(db, "u1", fcmToken="token-1")
    outcome = triggers.handle_product_scanned(services, "u1", "p1", {"productName": "Oat Milk", "ecoScore": 85})
    assert outcome.pushed
    stored = list(db.docs("notifications").values())
    assert stored[0]["title"] == "Excellent Choice! 🌟"
    assert stored[0]["category"] == "scan_insight"


def test_scan_insight_falls_back_to_name(services, db):
    add_user(db, "u1")
    outcome = triggers.handle_product_scanned(services, "u1", "p1", {"name": "Tap Water", "ecoScore": 45})
    assert outcome.persisted and not outcome.pushed
    assert list(db.docs("notifications").values())[0]["body"].startswith("Tap Water scored 45/100")


@pytest.mark.parametrize("product", [None, {}, {"productName": "X"}, {"ecoScore": 140}, {"ecoScore": "n/a"}])
def test_scan_without_usable_score_sends_nothing(services, db, product):
    add_user(db, "u1", fcmToken="token-1")
    assert triggers.handle_product_scanned(services, "u1", "p1", product) is None
    assert db.docs("notifications") == {}


def test_parse_user_challenge_id():
    assert triggers.parse_user_challenge_id("abc-def-2025-11-09") == ("abc-def", "2025-11-09")
    with pytest.raises(MalformedInputError):
        triggers.parse_user_challenge_id("abc-2025-11")


def test_completing_all_challenges_extends_the_streak(services, db):
    add_user(db, "u1", streak=4)
    updated = triggers.handle_user_challenge_updated(
        services, "u1-2025-11-09", {"completed": [True, False]}, {"completed": [True, True]}
    )
    assert updated is True
    assert db.docs("users")["u1"]["streak"] == 5
    assert db.docs("users")["u1"]["lastChallengeDate"] == "2025-11-09"


def test_already_completed_day_is_not_counted_twice(services, db):
    add_user(db, "u1", streak=4)
    updated = triggers.handle_user_challenge_updated(
        services, "u1-2025-11-09", {"completed": [True, True]}, {"completed": [True, True]}
    )
    assert updated is False
    assert db.docs("users")["u1"]["streak"] == 4


def test_partial_completion_does_nothing(services, db):
    add_user(db, "u1", streak=4)
    assert not triggers.handle_user_challenge_updated(
        services, "u1-2025-11-09", {"completed": [False, False]}, {"completed": [True, False]}
    )


def test_unknown_user_is_not_an_error(services):
    assert not triggers.handle_user_challenge_updated(
        services, "ghost-2025-11-09", {"completed": [False]}, {"completed": [True]}
    )
