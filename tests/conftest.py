# tests/conftest.py
# --------------------------------------------------------------------------------------
# One fresh app + in-memory SQLite database per test.
#
# The app context is NOT held open across client requests; Flask would otherwise
# reuse it (and `g`) for every request made by the test client.
# --------------------------------------------------------------------------------------
from __future__ import annotations

import pytest

from hopefoundation import create_app
from hopefoundation.config import TestingConfig
from hopefoundation.extensions import db
from tests.helpers import bearer, make_token


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user_headers():
    return bearer(make_token())


@pytest.fixture
def admin_headers():
    return bearer(make_token(sub="auth0|admin-1", email="admin@hopefoundation.org", roles=["admin"]))
