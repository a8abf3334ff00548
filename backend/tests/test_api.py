"""HTTP-level tests — every domain error kind maps to a distinct status.

Covers:
- Award → 201, rank violation → 403, bad input → 400, missing employee → 404
- Undo → 200 with compensating event, second undo → 404
- Redemption → 201, insufficient balance → 409
- Balance, leaderboards, recent awards, history, activity reads
- Roster and reward catalog routes, health
"""
import pytest

from tests.conftest import LOCATION, create_test_employee, make_reward


def _setup(client):
    """Create a general manager, an assistant manager and a team member."""
    gm = create_test_employee(client, name="Gale", title="General Manager")
    am = create_test_employee(client, name="Morgan", title="Assistant Manager")
    member = create_test_employee(client, name="Avery", title="Team Member")
    return gm, am, member


def _award(client, actor, target, amount=25, reason="Great service."):
    return client.post("/api/points/awards", json={
        "employee_id": target["employee_id"],
        "location_id": LOCATION,
        "amount": amount,
        "reason": reason,
        "awarded_by": actor["employee_id"],
    })


def _balance(client, employee) -> int:
    resp = client.get(f"/api/points/balance/{employee['employee_id']}")
    assert resp.status_code == 200
    return resp.json()["balance"]


class TestAwardEndpoint:

    def test_award_created(self, client):
        _, am, member = _setup(client)
        resp = _award(client, am, member)
        assert resp.status_code == 201
        data = resp.json()
        assert data["amount"] == 25
        assert data["source"] == "manual_award"
        assert data["awarded_by"] == am["employee_id"]
        assert _balance(client, member) == 25

    def test_award_shows_on_weekly_leaderboard(self, client):
        _, am, member = _setup(client)
        _award(client, am, member)
        resp = client.get("/api/points/leaderboard/weekly", params={"location_id": LOCATION})
        assert resp.status_code == 200
        assert resp.json()["entries"] == [
            {"employee_id": member["employee_id"], "display_name": "Avery", "points": 25},
        ]

    def test_team_member_forbidden(self, client):
        _, am, member = _setup(client)
        resp = _award(client, member, am)
        assert resp.status_code == 403
        assert resp.json()["error"] == "permission_denied"
        assert _balance(client, am) == 0

    def test_zero_points_rejected(self, client):
        _, am, member = _setup(client)
        resp = _award(client, am, member, amount=0)
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_fractional_points_rejected(self, client):
        _, am, member = _setup(client)
        resp = _award(client, am, member, amount=2.5)
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    @pytest.mark.parametrize("amount", [True, "7", None])
    def test_non_integer_amount_rejected(self, client, amount):
        _, am, member = _setup(client)
        resp = _award(client, am, member, amount=amount)
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"
        assert "amount" in resp.json()["detail"]
        assert _balance(client, member) == 0

    def test_game_award_amount_is_strict(self, client):
        _, _, member = _setup(client)
        resp = client.post("/api/points/game-awards", json={
            "employee_id": member["employee_id"],
            "location_id": LOCATION,
            "amount": True,
            "game_name": "Bingo",
        })
        assert resp.status_code == 400
        assert _balance(client, member) == 0

    def test_blank_reason_rejected(self, client):
        _, am, member = _setup(client)
        assert _award(client, am, member, reason="   ").status_code == 400

    def test_missing_target(self, client):
        _, am, _ = _setup(client)
        resp = _award(client, am, {"employee_id": "00000000-0000-0000-0000-000000000000"})
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_game_award(self, client):
        _, _, member = _setup(client)
        resp = client.post("/api/points/game-awards", json={
            "employee_id": member["employee_id"],
            "location_id": LOCATION,
            "amount": 8,
            "game_name": "Bingo",
        })
        assert resp.status_code == 201
        assert resp.json()["awarded_by"] is None
        assert _balance(client, member) == 8


class TestUndoEndpoint:

    def test_undo_and_retry(self, client):
        _, am, member = _setup(client)
        award = _award(client, am, member).json()

        resp = client.post(f"/api/points/events/{award['event_id']}/undo", json={
            "reason": "wrong employee",
            "actor_id": am["employee_id"],
        })
        assert resp.status_code == 200
        assert resp.json()["amount"] == -25
        assert resp.json()["source"] == "undo"
        activity = client.get(f"/api/points/activity/{member['employee_id']}").json()
        original = next(e for e in activity["events"] if e["event_id"] == award["event_id"])
        assert original["reversed_by_event_id"] == resp.json()["event_id"]
        assert _balance(client, member) == 0

        again = client.post(f"/api/points/events/{award['event_id']}/undo", json={
            "reason": "wrong employee",
            "actor_id": am["employee_id"],
        })
        assert again.status_code == 404

    def test_undo_requires_reason(self, client):
        _, am, member = _setup(client)
        award = _award(client, am, member).json()
        resp = client.post(f"/api/points/events/{award['event_id']}/undo", json={
            "reason": "",
            "actor_id": am["employee_id"],
        })
        assert resp.status_code == 400
        assert _balance(client, member) == 25

    def test_recent_awards_flags_undo(self, client):
        _, am, member = _setup(client)
        award = _award(client, am, member).json()
        resp = client.get("/api/points/recent-awards", params={
            "actor_id": am["employee_id"], "location_id": LOCATION,
        })
        assert resp.status_code == 200
        rows = resp.json()
        assert rows[0]["event_id"] == award["event_id"]
        assert rows[0]["can_undo"] is True
        assert rows[0]["employee_name"] == "Avery"


class TestRedemptionEndpoint:

    def test_redeem_and_insufficient(self, client, db):
        gm, _, member = _setup(client)
        _award(client, gm, member, amount=40)
        reward = make_reward(db, cost=30, name="Free Shake")

        body = {"employee_id": member["employee_id"], "location_id": LOCATION, "reward_id": reward.reward_id}
        first = client.post("/api/points/redemptions", json=body)
        assert first.status_code == 201
        assert first.json()["amount"] == -30
        assert first.json()["source_detail"] == "Free Shake"

        second = client.post("/api/points/redemptions", json=body)
        assert second.status_code == 409
        assert second.json()["error"] == "insufficient_balance"
        assert _balance(client, member) == 10

    def test_unknown_reward(self, client):
        _, _, member = _setup(client)
        resp = client.post("/api/points/redemptions", json={
            "employee_id": member["employee_id"], "location_id": LOCATION, "reward_id": "nope",
        })
        assert resp.status_code == 404


class TestReads:

    def test_leaderboard_window(self, client):
        gm, am, member = _setup(client)
        _award(client, gm, am, amount=5)
        _award(client, gm, member, amount=9)
        resp = client.get("/api/points/leaderboard", params={
            "location_id": LOCATION,
            "window_start": "2000-01-01T00:00:00Z",
            "window_end": "2100-01-01T00:00:00Z",
        })
        assert resp.status_code == 200
        assert [e["points"] for e in resp.json()["entries"]] == [9, 5]

    def test_monthly_leaderboard(self, client):
        gm, _, member = _setup(client)
        _award(client, gm, member, amount=12)
        resp = client.get("/api/points/leaderboard/monthly", params={"location_id": LOCATION})
        assert resp.status_code == 200
        assert resp.json()["entries"][0]["points"] == 12

    def test_history_and_activity(self, client):
        gm, _, member = _setup(client)
        _award(client, gm, member, amount=12, reason="Drive-thru speed")

        history = client.get("/api/points/history", params={"location_id": LOCATION, "source": "manual_award"})
        assert history.status_code == 200
        assert history.json()[0]["awarded_by_name"] == "Gale"
        assert history.json()[0]["source_detail"] == "Drive-thru speed"

        activity = client.get(f"/api/points/activity/{member['employee_id']}")
        assert activity.status_code == 200
        assert activity.json()["balance"] == 12
        assert len(activity.json()["events"]) == 1

    def test_rewards_listed_cheapest_first(self, client, db):
        make_reward(db, cost=100, name="Gift Card")
        make_reward(db, cost=20, name="Fries")
        make_reward(db, cost=50, name="Retired", active=False)
        resp = client.get("/api/rewards/", params={"location_id": LOCATION})
        assert resp.status_code == 200
        assert [r["reward_name"] for r in resp.json()] == ["Fries", "Gift Card"]

    def test_employee_roster(self, client):
        gm, _, _ = _setup(client)
        assert client.get(f"/api/employees/{gm['employee_id']}").json()["title"] == "General Manager"
        assert len(client.get("/api/employees/", params={"location_id": LOCATION}).json()) == 3
        assert client.get("/api/employees/missing").status_code == 404

    def test_unknown_title_rejected_at_roster(self, client):
        resp = client.post("/api/employees/", json={
            "location_id": LOCATION, "display_name": "Dana", "title": "Regional Director",
        })
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_awardable_employees(self, client):
        _, am, member = _setup(client)
        create_test_employee(client, name="Sam", title="Shift Manager")
        resp = client.get("/api/employees/awardable", params={
            "actor_id": am["employee_id"], "location_id": LOCATION,
        })
        assert resp.status_code == 200
        assert [e["display_name"] for e in resp.json()] == ["Avery", "Sam"]

        resp = client.get("/api/employees/awardable", params={
            "actor_id": member["employee_id"], "location_id": LOCATION,
        })
        assert resp.json() == []

    def test_awardable_employees_unknown_actor(self, client):
        resp = client.get("/api/employees/awardable", params={"actor_id": "ghost", "location_id": LOCATION})
        assert resp.status_code == 404

    def test_health_endpoint(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
