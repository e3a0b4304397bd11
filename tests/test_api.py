import pytest

from daily_selector import generate_daily_challenges
from main import create_app

from conftest import TODAY, add_user


@pytest.fixture
def client(services):
    app = create_app(services)
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "OK"}


def test_preview_challenges_does_not_write(client, db):
    response = client.get("/challenges/preview?date=2025-11-09")
    body = response.get_json()
    assert response.status_code == 200
    assert body["date"] == "2025-11-09"
    assert [c["id"] for c in body["challenges"]] == [e.id for e in generate_daily_challenges(TODAY).entries]
    assert db.docs("challenges") == {}


def test_invalid_date_is_a_bad_request(client):
    response = client.get("/challenges/preview?date=2025-13-40")
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "MALFORMED_INPUT"


def test_generate_challenges_stores_them(client, db):
    response = client.post("/challenges/generate?date=2025-11-09")
    assert response.status_code == 200
    assert "2025-11-09" in db.docs("challenges")


def test_generate_tips(client, db):
    response = client.post("/tips/generate?days=3&start=2025-11-09")
    body = response.get_json()
    assert response.status_code == 200
    assert [t["date"] for t in body["tips"]] == ["2025-11-09", "2025-11-10", "2025-11-11"]
    assert len(db.docs("daily_tips")) == 3


def test_generate_tips_validates_days(client):
    response = client.post("/tips/generate?days=0")
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "VALIDATION_ERROR"


def test_tip_pool_stats(client):
    body = client.get("/tips").get_json()
    assert body["stats"]["totalTips"] == 94
    assert body["stats"]["totalCategories"] == 8


def test_streak_check_unknown_user(client):
    response = client.post("/notifications/streak-check?userId=ghost")
    assert response.status_code == 404
    assert response.get_json()["error_code"] == "USER_NOT_FOUND"


def test_streak_check_requires_user_id(client):
    assert client.post("/notifications/streak-check").status_code == 400


def test_streak_check_user_without_token(client, db):
    add_user(db, "u1", streak=3)
    response = client.post("/notifications/streak-check?userId=u1")
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "NO_RECIPIENT"


def test_streak_check_sends_warning(client, db):
    add_user(db, "u1", fcmToken="t1", streak=3)
    response = client.post("/notifications/streak-check?userId=u1")
    body = response.get_json()
    assert response.status_code == 200
    assert body["completedToday"] is False
    assert body["pushed"] is True


def test_broadcast(client, db):
    add_user(db, "u1", fcmToken="t1")
    add_user(db, "u2", fcmToken="t2")
    response = client.post("/notifications/broadcast", json={"title": "Earth Hour", "body": "Lights off!"})
    body = response.get_json()
    assert response.status_code == 200
    assert body["sentTo"] == 2
    assert body["failed"] == []


def test_broadcast_requires_title(client):
    assert client.post("/notifications/broadcast", json={"body": "Lights off!"}).status_code == 400


def test_replay_dry_run_stores_nothing(client, db):
    payload = {"userId": "u1", "before": {"streak": 6}, "after": {"streak": 7}}
    body = client.post("/notifications/replay", json=payload).get_json()
    assert [e["title"] for e in body["events"]] == ["🔥 7-Day Streak Milestone!"]
    assert db.docs("notifications") == {}


def test_replay_delivers_when_requested(client, db):
    payload = {
        "userId": "u1",
        "before": {"ecoPoints": 990, "fcmToken": "t1"},
        "after": {"ecoPoints": 1000, "fcmToken": "t1"},
        "dryRun": False,
    }
    body = client.post("/notifications/replay", json=payload).get_json()
    assert body["outcomes"][0]["pushed"] is True
    assert list(db.docs("notifications").values())[0]["title"] == "1000 Points Milestone! 🎯"


def test_unknown_route(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.get_json()["error_code"] == "NOT_FOUND"


def test_streak_check_reports_storage_failure(client, db):
    add_user(db, "u1", fcmToken="t1", streak=3)
    db.fail_add_for.add("u1")
    response = client.post("/notifications/streak-check?userId=u1")
    assert response.status_code == 503
    body = response.get_json()
    assert body["error_code"] == "PERSISTENCE_ERROR"
    assert body["details"] == {"userId": "u1"}
