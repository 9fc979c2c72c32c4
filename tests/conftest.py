from __future__ import annotations

from datetime import date

import pytest
from flask import Flask


@pytest.fixture
def fixed_today() -> date:
    return date(2025, 3, 12)


@pytest.fixture
def make_client():
    """Flask test client with the given controllers and a logged-in session."""

    def _make(container, registrars, *, user_id=1, role=None, entity_id=None):
        app = Flask(__name__)
        app.secret_key = "test-secret"
        app.config["TESTING"] = True
        for register in registrars:
            register(app, container)

        client = app.test_client()
        if role is not None:
            with client.session_transaction() as sess:
                sess["user_id"] = user_id
                sess["role"] = role.value
                if entity_id is not None:
                    sess["entity_id"] = entity_id
        return client

    return _make
