"""
Integration tests for the driver directory gate.
"""
from app.services.subscription_service import activate_for_plan


def _seed_drivers(make_user, count, **fields):
    return [
        make_user(f"d{i}@example.com", role="driver", name=f"Driver {i}", **fields)
        for i in range(count)
    ]


def test_driver_is_turned_away(client, driver, login_as):
    login_as("driver@example.com")
    response = client.get("/drivers")

    assert response.status_code == 403
    body = response.json()
    assert body["gate"] == "driver"
    assert "error" in body


def test_owner_without_subscription_is_turned_away(client, owner, login_as):
    login_as("owner@example.com")
    response = client.get("/drivers")

    assert response.status_code == 403
    assert response.json()["gate"] == "no_subscription"


def test_anonymous_preview_hides_contact_details(client, make_user):
    _seed_drivers(make_user, 10, phone="+995 555 000 000", verified=True, trips=12)

    response = client.get("/drivers")

    assert response.status_code == 200
    body = response.json()
    assert body["preview"] is True
    assert len(body["drivers"]) == 8
    for row in body["drivers"]:
        assert "phone" not in row
        assert "verified" not in row
        assert "trips" not in row


def test_subscribed_owner_gets_full_directory(client, db, owner, make_user, login_as):
    make_user("plain@example.com", role="driver", name="Plain", rating=4.9)
    make_user("top@example.com", role="driver", name="Top", verified=True, rating=4.1, phone="555")
    make_user("mid@example.com", role="driver", name="Mid", verified=True, rating=3.0)
    activate_for_plan(db, owner, "starter")

    login_as("owner@example.com")
    body = client.get("/drivers").json()

    assert body["preview"] is False
    assert [d["name"] for d in body["drivers"]] == ["Top", "Mid", "Plain"]
    assert body["drivers"][0]["phone"] == "555"
    assert body["drivers"][0]["verified"] is True


def test_directory_closes_when_subscription_cancelled(client, db, owner, login_as):
    sub = activate_for_plan(db, owner, "starter")
    login_as("owner@example.com")
    assert client.get("/drivers").status_code == 200

    client.post(f"/subscriptions/{sub.id}/cancel")
    assert client.get("/drivers").status_code == 403


def test_directory_filters(client, make_user):
    make_user("a@example.com", role="driver", name="Nika", location="Tbilisi", categories=["C", "CE"])
    make_user("b@example.com", role="driver", name="Levan", location="Batumi", categories=["B"])

    by_category = client.get("/drivers", params={"category": "ce"}).json()["drivers"]
    assert [d["name"] for d in by_category] == ["Nika"]

    assert [d["name"] for d in client.get("/drivers", params={"category": "B"}).json()["drivers"]] == ["Levan"]
    # Whole categories only: "E" is not a category of anyone
    assert client.get("/drivers", params={"category": "E"}).json()["drivers"] == []

    by_text = client.get("/drivers", params={"q": "batumi"}).json()["drivers"]
    assert [d["name"] for d in by_text] == ["Levan"]


def test_admin_may_browse_directory(client, admin, make_user, login_as):
    _seed_drivers(make_user, 2)
    login_as("admin@example.com")

    body = client.get("/drivers").json()
    assert body["preview"] is False
    assert len(body["drivers"]) == 2


def test_driver_detail(client, db, owner, driver, login_as):
    assert client.get(f"/drivers/{driver.id}").status_code == 401

    login_as("owner@example.com")
    assert client.get(f"/drivers/{driver.id}").status_code == 403

    activate_for_plan(db, owner, "starter")
    detail = client.get(f"/drivers/{driver.id}").json()["driver"]
    assert detail["email"] == "driver@example.com"
    assert detail["phone"] == "+995 555 000 111"

    assert client.get("/drivers/9999").status_code == 404
    # An owner id is not a driver id
    assert client.get(f"/drivers/{owner.id}").status_code == 404


def test_driver_cannot_open_driver_detail(client, driver, make_user, login_as):
    other = make_user("other-driver@example.com", role="driver")
    login_as("driver@example.com")

    response = client.get(f"/drivers/{other.id}")
    assert response.status_code == 403
    assert response.json()["gate"] == "driver"
