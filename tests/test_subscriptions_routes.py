"""
Integration tests for /subscriptions endpoints.
"""
from app.core.messages import message


def test_plans_are_public_and_sorted_by_price(client):
    plans = client.get("/subscriptions/plans").json()["plans"]

    assert [p["name"] for p in plans] == ["starter", "business", "corporate"]
    assert plans[0] == {"name": "starter", "job_limit": 2, "price_gel": 20, "unlimited": False}
    assert plans[2]["unlimited"] is True


def test_pay_activates_plan(client, owner, login_as):
    login_as("owner@example.com")
    assert client.get("/subscriptions/me").json() == {"subscription": None}

    response = client.post("/subscriptions/pay", json={"plan": "Business"})

    assert response.status_code == 201
    sub = response.json()["subscription"]
    assert sub["plan"] == "business"
    assert sub["status"] == "active"
    assert sub["job_limit"] == 10
    assert sub["price_gel"] == 50

    assert client.get("/subscriptions/me").json()["subscription"]["id"] == sub["id"]


def test_pay_twice_replaces_subscription(client, owner, login_as):
    login_as("owner@example.com")
    first = client.post("/subscriptions/pay", json={"plan": "starter"}).json()["subscription"]
    second = client.post("/subscriptions/pay", json={"plan": "corporate"}).json()["subscription"]

    assert second["id"] != first["id"]
    assert client.get("/subscriptions/me").json()["subscription"]["plan"] == "corporate"


def test_pay_rejects_unknown_plan(client, owner, login_as):
    login_as("owner@example.com")
    response = client.post("/subscriptions/pay", json={"plan": "platinum"})

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_plan"


def test_pay_is_owner_only(client, driver, login_as):
    assert client.post("/subscriptions/pay", json={"plan": "starter"}).status_code == 401

    login_as("driver@example.com")
    response = client.post("/subscriptions/pay", json={"plan": "starter"})
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"
    assert response.json()["error"] == message("owners_only")


def test_admin_only_routes_keep_generic_message(client, owner, login_as):
    login_as("owner@example.com")
    response = client.get("/admin/stats")
    assert response.status_code == 403
    assert response.json()["error"] == message("forbidden")


def test_me_is_null_for_non_owners(client, driver, login_as):
    assert client.get("/subscriptions/me").status_code == 401

    login_as("driver@example.com")
    assert client.get("/subscriptions/me").json() == {"subscription": None}


def test_usage_tracks_jobs(client, owner, login_as):
    login_as("owner@example.com")
    usage = client.get("/subscriptions/me/usage").json()
    assert usage["plan"] is None
    assert usage["remaining"] == 0

    client.post("/subscriptions/pay", json={"plan": "starter"})
    client.post("/jobs", json={"title": "T", "route": "R", "price": "1", "type": "Tent", "date": "D"})

    usage = client.get("/subscriptions/me/usage").json()
    assert usage["plan"] == "starter"
    assert usage["limit"] == 2
    assert usage["used"] == 1
    assert usage["remaining"] == 1
    assert usage["unlimited"] is False
    assert usage["expires_at"] is not None


def test_usage_is_owner_only(client, driver, login_as):
    login_as("driver@example.com")
    assert client.get("/subscriptions/me/usage").status_code == 403


def test_cancel_own_subscription(client, owner, make_user, login_as):
    login_as("owner@example.com")
    sub_id = client.post("/subscriptions/pay", json={"plan": "starter"}).json()["subscription"]["id"]

    response = client.post(f"/subscriptions/{sub_id}/cancel")
    assert response.status_code == 200
    assert response.json()["subscription"]["status"] == "cancelled"
    assert client.get("/subscriptions/me").json() == {"subscription": None}

    again = client.post(f"/subscriptions/{sub_id}/cancel")
    assert again.status_code == 400
    assert again.json()["code"] == "invalid_transition"


def test_cannot_cancel_someone_elses_subscription(client, db, owner, make_user, login_as):
    from app.services.subscription_service import activate_for_plan

    other = make_user("other@example.com", role="owner")
    sub = activate_for_plan(db, other, "starter")

    login_as("owner@example.com")
    assert client.post(f"/subscriptions/{sub.id}/cancel").status_code == 404
