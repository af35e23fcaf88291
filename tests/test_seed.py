# tests/test_seed.py

from __future__ import annotations

from taskboard.cli.bootstrap import create_initial_state
from taskboard.core.state import AppState
from taskboard.seed import initialize_data
from taskboard.storage.keys import SEED_MARKER_KEY


def test_initialize_data_seeds_once(state: AppState) -> None:
    initialize_data(state.store, state.users)

    assert {u.email for u in state.users.list_users()} == {"manager@example.com", "member@example.com"}
    projects = state.projects.list_projects()
    assert [p.name for p in projects] == ["Website Redesign"]
    assert projects[0].tasks[0].status == "In Progress"
    assert state.store.get(SEED_MARKER_KEY) == "true"

    # Seeded credentials work through the normal login path.
    assert state.sessions.login("manager@example.com", "manager123").is_manager

    # A deleted sample project is not re-created on the next start.
    state.projects.delete_project("1")
    initialize_data(state.store, state.users)
    assert state.projects.list_projects() == []
    assert len(state.users.list_users()) == 2


def test_initialize_data_swallows_storage_errors(fake_state: AppState) -> None:
    fake_state.store.fail_writes = True  # type: ignore[attr-defined]
    initialize_data(fake_state.store, fake_state.users)
    assert fake_state.users.list_users() == []


def test_create_initial_state_seeds_and_restores_session(settings) -> None:
    settings.seed_data = True

    first = create_initial_state(settings=settings)
    assert first.sessions.current is None
    first.sessions.login("member@example.com", "member123")

    # Next start: same database, session restored, sample data not duplicated.
    second = create_initial_state(settings=settings)
    assert second.sessions.current is not None
    assert second.sessions.current.email == "member@example.com"
    assert len(second.projects.list_projects()) == 1


def test_initialize_data_keeps_existing_users_when_reads_fail(fake_state: AppState) -> None:
    fake_state.users.register_user("lead@example.com", "secret123", role="manager")
    store = fake_state.store
    before = dict(store.data)  # type: ignore[attr-defined]

    store.fail_reads = True  # type: ignore[attr-defined]
    initialize_data(store, fake_state.users)

    assert store.data == before  # type: ignore[attr-defined]
