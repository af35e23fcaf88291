# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.cli.bootstrap import build_state
from taskboard.core.state import AppState
from taskboard.storage.record_store import SqliteRecordStore

from .fakes import FakeRecordStore

MANAGER = ("manager@example.com", "manager123")
MEMBER = ("member@example.com", "member123")


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        data_dir=tmp_path,
        db_path=tmp_path / "records.sqlite3",
        seed_data=False,
        serialize_writes=True,
        assignee_domain="",
        # Cheap hashing keeps the suite fast.
        password_iterations=1_000,
    )


@pytest.fixture()
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with the real SQLite record store (its behaviour is
    part of what we want to test).
    """
    return build_state(settings, SqliteRecordStore(settings.db_path))


@pytest.fixture()
def fake_state(settings: SimpleNamespace, store: FakeRecordStore) -> AppState:
    """AppState over the in-memory fake store (for failure injection)."""
    return build_state(settings, store)


def _register_team(state: AppState) -> None:
    state.users.register_user(MANAGER[0], MANAGER[1], name="Project Manager", role="manager", user_id="manager1")
    state.users.register_user(MEMBER[0], MEMBER[1], name="Team Member", role="member", user_id="member1")


@pytest.fixture()
def team_state(state: AppState) -> AppState:
    """SQLite-backed state with one manager and one member registered."""
    _register_team(state)
    return state


@pytest.fixture()
def fake_team_state(fake_state: AppState) -> AppState:
    _register_team(fake_state)
    return fake_state
