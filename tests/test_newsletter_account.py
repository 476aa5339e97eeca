# tests/test_newsletter_account.py
# --------------------------------------------------------------------------------------
# Newsletter signup/unsubscribe and the signed-in donor dashboard.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from decimal import Decimal

import sqlalchemy as sa

from hopefoundation.extensions import db
from hopefoundation.models import Donation, NewsletterSubscriber, Profile
from tests.helpers import bearer, make_token


def _subscriber(email):
    return db.session.scalar(sa.select(NewsletterSubscriber).where(NewsletterSubscriber.email == email))


# ---------------------------------------------------------------------------
# Newsletter
# ---------------------------------------------------------------------------
def test_signup_is_idempotent_per_email(app, client):
    first = client.post("/newsletter/signup", json={"email": "Reader@Example.org", "name": "Reader"})
    assert first.status_code == 200
    assert first.get_json()["existing"] is False
    assert first.get_json()["email"] == "reader@example.org"

    again = client.post("/newsletter/signup", json={"email": "reader@example.org"})
    assert again.get_json()["existing"] is True
    assert again.get_json()["id"] == first.get_json()["id"]

    with app.app_context():
        assert db.session.scalar(sa.select(sa.func.count()).select_from(NewsletterSubscriber)) == 1


def test_signup_validation(client):
    res = client.post("/newsletter/signup", json={})
    assert res.status_code == 400
    assert res.get_json()["error"] == "Email is required"

    res = client.post("/newsletter/signup", json={"email": "nope"})
    assert res.status_code == 400


def test_signup_links_signed_in_user(app, client):
    client.post("/newsletter/signup", json={"email": "member@example.org"}, headers=bearer(make_token(sub="auth0|m1")))
    with app.app_context():
        assert _subscriber("member@example.org").user_id == "auth0|m1"


def test_unsubscribe_and_resubscribe(app, client):
    client.post("/newsletter/signup", json={"email": "leaving@example.org"})
    with app.app_context():
        token = _subscriber("leaving@example.org").unsubscribe_token

    res = client.post("/newsletter/unsubscribe", json={"token": token})
    assert res.status_code == 200
    assert res.get_json()["is_active"] is False

    res = client.post("/newsletter/signup", json={"email": "leaving@example.org"})
    assert res.get_json()["existing"] is True
    with app.app_context():
        assert _subscriber("leaving@example.org").is_active is True


def test_unsubscribe_errors(client):
    assert client.post("/newsletter/unsubscribe", json={}).status_code == 400
    assert client.post("/newsletter/unsubscribe", json={"token": "unknown"}).status_code == 404


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------
def test_dashboard_requires_login(client):
    res = client.get("/account/dashboard")
    assert res.status_code == 401


def test_dashboard_lists_own_donations(app, client):
    with app.app_context():
        db.session.add_all(
            [
                Donation(donor_name="Me", donor_email="donor@example.org", amount=Decimal("20")),
                Donation(donor_name="Me", donor_email="donor@example.org", amount=Decimal("5"), payment_status="failed"),
                Donation(donor_name="Other", donor_email="other@example.org", amount=Decimal("99")),
            ]
        )
        db.session.commit()

    headers = bearer(make_token(email="donor@example.org", name="Dana Donor"))
    res = client.get("/account/dashboard", headers=headers)
    assert res.status_code == 200
    body = res.get_json()
    assert len(body["donations"]) == 2
    assert body["totalDonated"] == 20.0
    assert body["profile"]["display_name"] == "Dana Donor"
    assert body["profile"]["is_admin"] is False


def test_first_request_creates_profile(app, client):
    client.get("/account/dashboard", headers=bearer(make_token(sub="auth0|new", email="new@example.org")))
    with app.app_context():
        profile = db.session.get(Profile, "auth0|new")
        assert profile.email == "new@example.org"
        assert profile.role == "user"


def test_expired_token_is_rejected(client):
    token = make_token(exp=1)
    assert client.get("/account/dashboard", headers=bearer(token)).status_code == 401
