"""
Shared fixtures: project root on sys.path, Flask test client and an
in-memory stand-in for the Manhattan WMS.
"""
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

os.environ.setdefault("LPN_LOCK_FILE_LOGGING", "false")


class FakeManhattan:
    """Records every call; inventory, conditions and outcomes are set per test."""

    def __init__(self, inventory=(), conditions=None, outcome=None, token="tok-123", codes=None):
        self.inventory = set(inventory)
        self.conditions = {k: list(v) for k, v in (conditions or {}).items()}
        self.outcome = outcome if outcome is not None else {"success": True}
        self.token = token
        self.codes = codes or [{"code": "", "desc": "Select Code"}]
        self.calls = []

    def names(self, name):
        return [c for c in self.calls if c[0] == name]

    def get_token(self, org):
        self.calls.append(("get_token", org))
        return self.token

    def search_inventory(self, token, org, lpn):
        self.calls.append(("search_inventory", lpn))
        return lpn in self.inventory

    def search_conditions(self, token, org, lpn):
        self.calls.append(("search_conditions", lpn))
        return list(self.conditions.get(lpn, []))

    def save_condition(self, token, org, lpn, code):
        self.calls.append(("save_condition", lpn, code))
        return self.outcome

    def delete_condition(self, token, org, lpn, code):
        self.calls.append(("delete_condition", lpn, code))
        return self.outcome

    def list_condition_codes(self, token, org):
        self.calls.append(("list_condition_codes", org))
        return self.codes


@pytest.fixture
def fake_manhattan():
    return FakeManhattan(inventory={"LPN1", "LPN2"})


@pytest.fixture
def app():
    from app import app as flask_app
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def use_fake(monkeypatch):
    """Route every ManhattanIntegration() built by the lock routes to the given fake."""
    def _install(fake):
        import modules.lpn_lock.routes as routes
        monkeypatch.setattr(routes, "ManhattanIntegration", lambda: fake)
        return fake
    return _install
