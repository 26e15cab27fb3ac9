from datetime import date

from habithub import weeks


def create(client, title="Read", days=("Mon", "Wed", "Fri"), **extra):
    response = client.post("/habits", json={"title": title, "scheduledDays": list(days), **extra})
    assert response.status_code == 201
    return response.json()["habit"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["timezone"] == "Asia/Kolkata"


def test_create_habit(client):
    habit = create(client, isCompulsory=True, color="#22c55e")
    assert habit["title"] == "Read"
    assert habit["scheduledDays"] == ["Mon", "Wed", "Fri"]
    assert habit["isCompulsory"] is True
    assert habit["isActive"] is True
    assert habit["color"] == "#22c55e"


def test_create_habit_missing_fields(client):
    assert client.post("/habits", json={"scheduledDays": ["Mon"]}).status_code == 400
    assert client.post("/habits", json={"title": "Read"}).status_code == 400
    assert client.post("/habits", json={"title": "Read", "scheduledDays": []}).status_code == 400
    assert client.post("/habits", json={"title": "", "scheduledDays": ["Mon"]}).status_code == 400


def test_list_update_delete(client):
    first = create(client, "First")
    second = create(client, "Second")

    listed = client.get("/habits").json()
    assert [h["id"] for h in listed] == [second["id"], first["id"]]

    response = client.put(f"/habits/{first['id']}", json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.json()["habit"]["title"] == "Renamed"
    assert response.json()["habit"]["scheduledDays"] == ["Mon", "Wed", "Fri"]

    assert client.delete(f"/habits/{second['id']}").status_code == 200
    assert [h["id"] for h in client.get("/habits").json()] == [first["id"]]

    assert client.put("/habits/missing", json={"title": "x"}).status_code == 404
    assert client.delete("/habits/missing").status_code == 404


def test_current_week_materializes(client, store):
    habit = create(client)
    body = client.get("/week/current").json()

    assert body["weekId"] == "2026-W43"
    assert body["weekStart"].startswith("2026-10-18T00:00:00")
    assert body["weekRange"] == "Oct 18, 2026 - Oct 24, 2026"
    assert body["today"] == "Wed"
    assert body["todayDate"] == "2026-10-21"
    assert body["weekDates"]["Sat"] == "2026-10-24"
    assert body["daysOrder"] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert body["progress"] == 0
    [entry] = body["habits"]
    assert entry["habitId"] == habit["id"]
    assert entry["completion"] == {d: False for d in body["daysOrder"]}

    client.get("/week/current")
    assert store.count_weeks() == 1


def test_toggle_scenario(client):
    habit = create(client)
    client.get("/week/current")

    response = client.post("/week/toggle", json={"habitId": habit["id"], "day": "Mon"})
    assert response.status_code == 200
    assert response.json()["completed"] is True
    assert response.json()["progress"] == 33

    response = client.post("/week/toggle", json={"habitId": habit["id"], "day": "Tue"})
    assert response.status_code == 400
    assert "not scheduled" in response.json()["detail"]

    assert client.post("/week/toggle", json={"habitId": habit["id"], "day": "Xyz"}).status_code == 400
    assert client.post("/week/toggle", json={"habitId": "missing", "day": "Mon"}).status_code == 404
    assert client.post("/week/toggle", json={"day": "Mon"}).status_code == 400


def test_toggle_without_week(client):
    response = client.post("/week/toggle", json={"habitId": "x", "day": "Mon"})
    assert response.status_code == 404


def test_calendar(client):
    habit = create(client, days=["Mon"])
    client.get("/week/current")
    client.post("/week/toggle", json={"habitId": habit["id"], "day": "Mon"})

    body = client.get("/week/calendar/2026/10").json()
    assert body["monthName"] == "October"
    assert body["today"] == "2026-10-21"
    cells = {c["fullDate"]: c for row in body["weeks"] for c in row}
    assert cells["2026-10-19"]["isComplete"] is True
    assert cells["2026-10-19"]["totalCount"] == 1
    assert cells["2026-10-20"]["hasHabits"] is False
    assert cells["2026-10-21"]["isToday"] is True

    assert client.get("/week/calendar/2026/13").status_code == 400
    assert client.get("/week/calendar/2026/0").status_code == 400
    assert client.get("/week/calendar/abc/1").status_code == 400


def test_habits_for_date(client):
    habit = create(client)
    client.get("/week/current")
    client.post("/week/toggle", json={"habitId": habit["id"], "day": "Wed"})

    body = client.get("/week/date/2026-10-21").json()
    assert body["dayName"] == "Wed"
    assert body["completedCount"] == 1
    assert body["totalCount"] == 1
    assert body["progress"] == 100
    assert body["isCurrentWeek"] is True

    empty = client.get("/week/date/2026-10-20").json()
    assert empty["habits"] == []
    assert empty["progress"] == 0

    no_week = client.get("/week/date/2025-01-01").json()
    assert no_week["habits"] == []
    assert no_week["isCurrentWeek"] is False
    assert "message" in no_week

    assert client.get("/week/date/2026-1-1").status_code == 400
    assert client.get("/week/date/2026-02-30").status_code == 400


def test_history_stats_and_lookup(client, store, freeze_today):
    habit = create(client, days=["Mon", "Tue"])
    client.get("/week/current")
    client.post("/week/toggle", json={"habitId": habit["id"], "day": "Mon"})

    freeze_today(date(2026, 10, 28))
    client.get("/week/current")
    freeze_today(date(2026, 11, 4))
    current = client.get("/week/current").json()
    assert current["weekId"] == "2026-W45"

    history = client.get("/weeks/history", params={"limit": 1}).json()
    assert history["total"] == 2
    assert history["hasMore"] is True
    assert [w["weekId"] for w in history["weeks"]] == ["2026-W44"]

    page = client.get("/weeks/history", params={"skip": 1, "limit": 1}).json()
    assert [w["weekId"] for w in page["weeks"]] == ["2026-W43"]
    assert page["weeks"][0]["progress"] == 50
    assert page["hasMore"] is False

    stats = client.get("/weeks/stats").json()
    assert stats["totalWeeks"] == 3
    assert stats["avgProgress"] == 17
    assert stats["totalHabits"] == 1
    assert stats["currentProgress"] == 0
    assert [w["weekId"] for w in stats["weeklyProgress"]] == ["2026-W43", "2026-W44", "2026-W45"]

    week = client.get("/weeks/2026-W43").json()
    assert week["isCurrent"] is False
    assert week["habits"][0]["completion"]["Mon"] is True
    assert client.get("/weeks/2030-W01").status_code == 404

    assert weeks.get_current_week(store).week_id == "2026-W45"


def test_history_rejects_negative_paging(client):
    assert client.get("/weeks/history", params={"skip": -1}).status_code == 400
    assert client.get("/weeks/history", params={"limit": 0}).status_code == 400


def test_app_starts_when_store_setup_fails(monkeypatch, caplog):
    from fastapi.testclient import TestClient

    from api.main import app
    from habithub import db

    def broken_store():
        raise ValueError("Invalid supabase_url")

    monkeypatch.setattr(db, "get_store", broken_store)

    with TestClient(app) as c:
        assert c.get("/health").status_code == 200

    assert "Storage setup failed at startup" in caplog.text
