"""Tests for donations and the goal ledger."""
from decimal import Decimal

from fastapi.testclient import TestClient

import crud.donations as donations
import crud.goals as goals
from crud.settings import set_setting
from models.goal import Donation, Goal
from schemas.goal import DonationCreate, GoalCreate


def make_goal(db, target="100", title="New study Bible"):
    return goals.create_goal(db, GoalCreate(title=title, target_amount=Decimal(target)))


def donate(db, amount, goal_id=None, **kwargs):
    return donations.create_donation(
        db, DonationCreate(amount=Decimal(amount), goal_id=goal_id, **kwargs)
    )


def test_donation_reaching_target_completes_goal(db):
    goal = make_goal(db)
    donate(db, "80", goal.id)
    donate(db, "20", goal.id)
    db.refresh(goal)
    assert goal.current_amount == Decimal("100")
    assert goal.completed is True


def test_donation_short_of_target_keeps_goal_open(db):
    goal = make_goal(db)
    donate(db, "80", goal.id)
    donate(db, "15", goal.id)
    db.refresh(goal)
    assert goal.current_amount == Decimal("95")
    assert goal.completed is False


def test_general_donation_touches_no_goal(db):
    goal = make_goal(db)
    donation = donate(db, "50")
    db.refresh(goal)
    assert donation.goal_id is None
    assert goal.current_amount == Decimal("0")
    assert goal.completed is False


def test_donation_to_missing_goal_recorded_as_general(db):
    donation = donate(db, "10", goal_id=999)
    assert donation.id is not None
    assert donation.goal_id is None


def test_anonymous_donation_drops_donor_name(db):
    donation = donate(db, "5", donor_name="Ruth", anonymous=True)
    assert donation.donor_name is None


def test_ledger_update_on_missing_goal_reports_skip(db):
    assert donations.apply_donation_to_goal(db, 12345, Decimal("10")) is False


def test_recalculate_repairs_drift(db):
    goal = make_goal(db)
    donate(db, "30", goal.id)
    goal.current_amount = Decimal("999")
    goal.completed = True
    db.commit()

    goal = donations.recalculate_goal(db, goal)
    assert goal.current_amount == Decimal("30")
    assert goal.completed is False


def test_deleting_goal_keeps_its_donations(db):
    goal = make_goal(db)
    donation = donate(db, "25", goal.id)
    goals.delete_goal(db, goal.id)

    kept = db.query(Donation).filter(Donation.id == donation.id).one()
    assert kept.goal_id is None
    assert donations.donation_totals(db) == (1, Decimal("25"))


def test_create_donation_endpoint(client: TestClient, db):
    goal = make_goal(db)
    response = client.post(
        "/api/donations",
        json={"amount": 25, "donor_name": "Naomi", "message": "Keep going!", "goal_id": goal.id},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["amount"] == 25.0
    assert data["donor_name"] == "Naomi"
    assert data["goal_id"] == goal.id
    assert response.headers["X-RateLimit-Limit"] == "10"
    assert response.headers["X-RateLimit-Remaining"] == "9"

    goal_response = client.get(f"/api/goals/{goal.id}")
    assert goal_response.status_code == 200
    assert goal_response.json()["current_amount"] == 25.0
    assert goal_response.json()["donation_count"] == 1


def test_create_donation_validation(client: TestClient):
    response = client.post("/api/donations", json={"amount": 0})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Validation failed"
    assert data["details"][0]["field"] == "amount"

    response = client.post("/api/donations", json={"amount": 100_001})
    assert response.status_code == 400

    response = client.post("/api/donations", json={"amount": 5, "message": "x" * 501})
    assert response.status_code == 400


def test_donations_disabled(client: TestClient, db):
    set_setting(db, "allowDonations", False)
    db.commit()
    response = client.post("/api/donations", json={"amount": 10})
    assert response.status_code == 403
    assert response.json()["code"] == "feature_disabled"
    assert db.query(Donation).count() == 0


def test_donation_rate_limit(client: TestClient):
    for _ in range(10):
        assert client.post("/api/donations", json={"amount": 1}).status_code == 201

    response = client.post("/api/donations", json={"amount": 1})
    assert response.status_code == 429
    assert response.json()["code"] == "rate_limited"
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert int(response.headers["Retry-After"]) > 0

    # other clients are unaffected
    other = client.post("/api/donations", json={"amount": 1}, headers={"x-forwarded-for": "198.51.100.7"})
    assert other.status_code == 201


def test_public_goals_list_only_active(client: TestClient, db):
    open_goal = make_goal(db, title="Commentary set")
    done_goal = make_goal(db, target="10", title="Highlighters")
    donate(db, "10", done_goal.id)

    response = client.get("/api/goals")
    assert response.status_code == 200
    titles = [g["title"] for g in response.json()]
    assert titles == [open_goal.title]


def test_unknown_goal_returns_404(client: TestClient):
    response = client.get("/api/goals/42")
    assert response.status_code == 404
    assert response.json() == {"error": "Goal not found", "code": "not_found"}


def test_concurrent_donations_both_counted(db, session_factory):
    """Two sessions holding the same goal must not overwrite each other's increment."""
    goal = make_goal(db)
    first, second = session_factory(), session_factory()
    try:
        assert first.get(Goal, goal.id).current_amount == Decimal("0")
        assert second.get(Goal, goal.id).current_amount == Decimal("0")

        assert donations.apply_donation_to_goal(first, goal.id, Decimal("60")) is True
        assert donations.apply_donation_to_goal(second, goal.id, Decimal("50")) is True
    finally:
        first.close()
        second.close()

    db.refresh(goal)
    assert goal.current_amount == Decimal("110")
    assert goal.completed is True
