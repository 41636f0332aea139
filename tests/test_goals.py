"""
Integration tests for the goals router and the completion -> streak flow.

Each test uses its own user id, so goals and profiles never collide with
other tests sharing the SQLite file.
"""
from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from conftest import auth_headers
from app.services import goal_store
from app.services import goals as goal_service
from app.services import profiles as profile_service


def _add(client, user_id, text="Read 20 pages", day="2091-01-10", is_public=False):
    r = client.post(
        "/goals",
        json={"text": text, "date": day, "is_public": is_public},
        headers=auth_headers(user_id),
    )
    assert r.status_code == 201, r.text
    return r.json()


def _complete(client, user_id, goal_id, completed=True):
    r = client.patch(
        f"/goals/{goal_id}/completion",
        json={"completed": completed},
        headers=auth_headers(user_id),
    )
    assert r.status_code == 200, r.text
    return r.json()


def _me(client, user_id):
    return client.get("/profiles/me", headers=auth_headers(user_id))


# ---------------------------------------------------------------------------
# Create / list
# ---------------------------------------------------------------------------

class TestCreateGoal:
    def test_create_defaults(self, client, user_id):
        body = _add(client, user_id, text="  Run 5k  ")
        assert body["id"] > 0
        assert body["owner_id"] == user_id
        assert body["text"] == "Run 5k"
        assert body["completed"] is False
        assert body["is_public"] is False
        assert body["date"] == "2091-01-10"
        assert body["created_at"]

    def test_date_defaults_to_client_date(self, client, user_id):
        r = client.post(
            "/goals",
            json={"text": "Stretch"},
            headers=auth_headers(user_id, client_date="2091-02-02"),
        )
        assert r.status_code == 201
        assert r.json()["date"] == "2091-02-02"

    def test_public_flag(self, client, user_id):
        body = _add(client, user_id, is_public=True)
        assert body["is_public"] is True

    @pytest.mark.parametrize("text", ["", "   ", "x" * 501])
    def test_bad_text_rejected(self, client, user_id, text):
        r = client.post("/goals", json={"text": text}, headers=auth_headers(user_id))
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_bad_date_rejected(self, client, user_id):
        r = client.post(
            "/goals", json={"text": "ok", "date": "tomorrow"}, headers=auth_headers(user_id)
        )
        assert r.status_code == 422

    def test_requires_identity(self, client):
        r = client.post("/goals", json={"text": "anon"})
        assert r.status_code == 401
        assert r.json()["code"] == "MISSING_IDENTITY"


class TestListGoals:
    def test_lists_only_own_goals_for_day_oldest_first(self, client, user_id):
        first = _add(client, user_id, text="first", day="2091-01-11")
        second = _add(client, user_id, text="second", day="2091-01-11")
        _add(client, user_id, text="other day", day="2091-01-12")
        _add(client, f"{user_id}-other", text="someone else", day="2091-01-11")

        r = client.get("/goals?day=2091-01-11", headers=auth_headers(user_id))
        assert r.status_code == 200
        body = r.json()
        assert body["date"] == "2091-01-11"
        assert body["total"] == 2
        assert [g["id"] for g in body["items"]] == [first["id"], second["id"]]

    def test_counts_completed(self, client, user_id):
        g = _add(client, user_id, day="2091-01-13")
        _add(client, user_id, day="2091-01-13")
        _complete(client, user_id, g["id"])
        body = client.get("/goals?day=2091-01-13", headers=auth_headers(user_id)).json()
        assert body["total"] == 2
        assert body["completed"] == 1

    def test_day_defaults_to_client_date(self, client, user_id):
        _add(client, user_id, day="2091-03-03")
        r = client.get("/goals", headers=auth_headers(user_id, client_date="2091-03-03"))
        assert r.json()["total"] == 1

    def test_empty_day(self, client, user_id):
        body = client.get("/goals?day=2091-12-31", headers=auth_headers(user_id)).json()
        assert body["total"] == 0
        assert body["items"] == []


# ---------------------------------------------------------------------------
# Completion + streak
# ---------------------------------------------------------------------------

class TestCompletion:
    def test_first_completion_creates_profile_with_streak_one(self, client, user_id):
        g = _add(client, user_id, day="2091-04-01")
        body = _complete(client, user_id, g["id"])
        assert body["goal"]["completed"] is True
        assert body["streak_triggered"] is True
        assert body["streak_applied"] is True
        assert body["profile"]["streak"] == 1
        assert body["profile"]["last_completion_date"] == "2091-04-01"

        me = _me(client, user_id).json()
        assert me["streak"] == 1

    def test_consecutive_days_build_streak(self, client, user_id):
        for i, day in enumerate(["2091-04-01", "2091-04-02", "2091-04-03"], start=1):
            g = _add(client, user_id, day=day)
            assert _complete(client, user_id, g["id"])["profile"]["streak"] == i

    def test_second_goal_same_day_does_not_inflate(self, client, user_id):
        a = _add(client, user_id, day="2091-04-05")
        b = _add(client, user_id, day="2091-04-05")
        _complete(client, user_id, a["id"])
        body = _complete(client, user_id, b["id"])
        assert body["profile"]["streak"] == 1

    def test_gap_resets(self, client, user_id):
        a = _add(client, user_id, day="2091-04-05")
        b = _add(client, user_id, day="2091-04-06")
        c = _add(client, user_id, day="2091-04-09")
        _complete(client, user_id, a["id"])
        assert _complete(client, user_id, b["id"])["profile"]["streak"] == 2
        assert _complete(client, user_id, c["id"])["profile"]["streak"] == 1

    def test_uncomplete_never_changes_streak(self, client, user_id):
        a = _add(client, user_id, day="2091-04-05")
        b = _add(client, user_id, day="2091-04-06")
        _complete(client, user_id, a["id"])
        _complete(client, user_id, b["id"])
        before = _me(client, user_id).json()

        body = _complete(client, user_id, b["id"], completed=False)
        assert body["goal"]["completed"] is False
        assert body["streak_triggered"] is False
        assert body["streak_applied"] is False
        assert body["profile"] is None

        after = _me(client, user_id).json()
        assert after["streak"] == before["streak"] == 2
        assert after["last_completion_date"] == before["last_completion_date"] == "2091-04-06"

    def test_repeat_completion_is_not_a_transition(self, client, user_id):
        g = _add(client, user_id, day="2091-04-05")
        _complete(client, user_id, g["id"])
        body = _complete(client, user_id, g["id"])
        assert body["goal"]["completed"] is True
        assert body["streak_triggered"] is False
        assert _me(client, user_id).json()["streak"] == 1

    def test_recomplete_after_uncomplete_same_day_keeps_streak(self, client, user_id):
        g = _add(client, user_id, day="2091-04-05")
        _complete(client, user_id, g["id"])
        _complete(client, user_id, g["id"], completed=False)
        body = _complete(client, user_id, g["id"])
        assert body["streak_triggered"] is True
        assert body["profile"]["streak"] == 1

    def test_streak_failure_keeps_goal_completed(self, client, user_id, monkeypatch):
        g = _add(client, user_id, day="2091-04-07")

        def boom(db, uid, completion_date):
            raise OperationalError("UPDATE users", {}, Exception("store down"))

        monkeypatch.setattr(profile_service, "record_completion", boom)
        body = _complete(client, user_id, g["id"])
        assert body["goal"]["completed"] is True
        assert body["streak_triggered"] is True
        assert body["streak_applied"] is False
        assert body["profile"] is None

        monkeypatch.undo()
        listed = client.get("/goals?day=2091-04-07", headers=auth_headers(user_id)).json()
        assert listed["items"][0]["completed"] is True
        assert _me(client, user_id).status_code == 404

    def test_streak_failure_result_readable_without_store(self, db, user_id, monkeypatch):
        goal = goal_store.insert_goal(db, user_id, "Meditate", date(2091, 4, 20))

        def boom(session, uid, completion_date):
            raise OperationalError("UPDATE users", {}, Exception("store down"))

        monkeypatch.setattr(profile_service, "record_completion", boom)
        result = goal_service.set_goal_completion(db, goal.id, user_id, True)
        # no session left to reload from: fields must already be in memory
        db.close()

        assert result.streak_applied is False
        assert result.goal.completed is True
        assert result.goal.text == "Meditate"
        assert result.goal.day == date(2091, 4, 20)
        assert result.goal.created_at is not None

    def test_existing_profile_display_fields_preserved(self, client, user_id):
        client.post("/profiles/sync", headers=auth_headers(user_id, name="Ana", avatar="http://a/ana.png"))
        g = _add(client, user_id, day="2091-04-08")
        profile = _complete(client, user_id, g["id"])["profile"]
        assert profile["display_name"] == "Ana"
        assert profile["avatar_url"] == "http://a/ana.png"
        assert profile["streak"] == 1


# ---------------------------------------------------------------------------
# Edit / share / delete
# ---------------------------------------------------------------------------

class TestEditGoal:
    def test_edit_text(self, client, user_id):
        g = _add(client, user_id)
        r = client.patch(
            f"/goals/{g['id']}/text", json={"text": " Read 30 pages "}, headers=auth_headers(user_id)
        )
        assert r.status_code == 200
        assert r.json()["text"] == "Read 30 pages"
        assert r.json()["date"] == g["date"]

    def test_edit_text_empty_rejected(self, client, user_id):
        g = _add(client, user_id)
        r = client.patch(f"/goals/{g['id']}/text", json={"text": "  "}, headers=auth_headers(user_id))
        assert r.status_code == 422

    def test_toggle_privacy(self, client, user_id):
        g = _add(client, user_id)
        r = client.patch(
            f"/goals/{g['id']}/privacy", json={"is_public": True}, headers=auth_headers(user_id)
        )
        assert r.status_code == 200
        assert r.json()["is_public"] is True

    def test_edits_do_not_touch_streak(self, client, user_id):
        g = _add(client, user_id, day="2091-05-01")
        _complete(client, user_id, g["id"])
        client.patch(f"/goals/{g['id']}/text", json={"text": "new"}, headers=auth_headers(user_id))
        client.patch(f"/goals/{g['id']}/privacy", json={"is_public": True}, headers=auth_headers(user_id))
        assert _me(client, user_id).json()["streak"] == 1

    def test_delete(self, client, user_id):
        g = _add(client, user_id, day="2091-05-02")
        r = client.delete(f"/goals/{g['id']}", headers=auth_headers(user_id))
        assert r.status_code == 204
        listed = client.get("/goals?day=2091-05-02", headers=auth_headers(user_id)).json()
        assert listed["total"] == 0

    def test_delete_keeps_profile(self, client, user_id):
        g = _add(client, user_id, day="2091-05-03")
        _complete(client, user_id, g["id"])
        client.delete(f"/goals/{g['id']}", headers=auth_headers(user_id))
        me = _me(client, user_id).json()
        assert me["streak"] == 1
        assert me["last_completion_date"] == "2091-05-03"


class TestOwnership:
    @pytest.mark.parametrize("method,path,payload", [
        ("patch", "/completion", {"completed": True}),
        ("patch", "/text", {"text": "hijack"}),
        ("patch", "/privacy", {"is_public": True}),
        ("delete", "", None),
    ])
    def test_other_user_forbidden(self, client, user_id, method, path, payload):
        g = _add(client, user_id)
        kwargs = {"headers": auth_headers(f"{user_id}-intruder")}
        if payload is not None:
            kwargs["json"] = payload
        r = getattr(client, method)(f"/goals/{g['id']}{path}", **kwargs)
        assert r.status_code == 403
        assert r.json()["code"] == "NOT_GOAL_OWNER"

    def test_missing_goal_404(self, client, user_id):
        r = client.patch(
            "/goals/999999999/completion", json={"completed": True}, headers=auth_headers(user_id)
        )
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "GOAL_NOT_FOUND"
        assert body["details"]["goal_id"] == 999999999


# ---------------------------------------------------------------------------
# Goal store contract
# ---------------------------------------------------------------------------

class TestGoalStore:
    def test_query_filters(self, db, user_id):
        day = date(2091, 6, 1)
        a = goal_store.insert_goal(db, user_id, "a", day, is_public=True)
        goal_store.insert_goal(db, user_id, "b", day, is_public=False)
        goal_store.insert_goal(db, user_id, "c", date(2091, 6, 2))

        assert len(goal_store.query_goals(db, owner_id=user_id)) == 3
        assert len(goal_store.query_goals(db, owner_id=user_id, day=day)) == 2
        public = goal_store.query_goals(db, owner_id=user_id, day=day, is_public=True)
        assert [g.id for g in public] == [a.id]

    def test_update_goal_field(self, db, user_id):
        g = goal_store.insert_goal(db, user_id, "x", date(2091, 6, 3))
        updated = goal_store.update_goal_field(db, g.id, "completed", True)
        assert updated.completed is True

    @pytest.mark.parametrize("field", ["owner_id", "day", "created_at", "id"])
    def test_immutable_fields_rejected(self, db, user_id, field):
        from app.core.errors import ImmutableFieldError

        g = goal_store.insert_goal(db, user_id, "x", date(2091, 6, 3))
        with pytest.raises(ImmutableFieldError):
            goal_store.update_goal_field(db, g.id, field, "nope")

    def test_update_missing_goal(self, db):
        from app.core.errors import GoalNotFoundError

        with pytest.raises(GoalNotFoundError):
            goal_store.update_goal_field(db, 987654321, "text", "x")

    def test_delete_missing_goal_returns_false(self, db):
        assert goal_store.delete_goal(db, 987654321) is False
