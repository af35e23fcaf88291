# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the record store, repositories and session manager into AppState,
- seeds sample data and restores the persisted session.
"""

from __future__ import annotations

import logging

from ..auth.session import SessionManager
from ..config import get_settings
from ..core.locks import KeyedLocks
from ..core.ports import RecordStore
from ..core.state import AppState
from ..projects.repository import ProjectRepository
from ..seed import initialize_data
from ..storage.record_store import SqliteRecordStore
from ..users.passwords import DEFAULT_ITERATIONS
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def build_state(settings, store: RecordStore) -> AppState:
    """Wire repositories around an existing store (shared per-key locks)."""
    serialize = bool(getattr(settings, "serialize_writes", True))
    locks = KeyedLocks(enabled=serialize)

    users = UserRepository(
        store,
        locks=locks,
        password_iterations=int(getattr(settings, "password_iterations", DEFAULT_ITERATIONS)),
    )
    projects = ProjectRepository(
        store,
        locks=locks,
        assignee_domain=str(getattr(settings, "assignee_domain", "") or ""),
    )
    return AppState(
        settings=settings,
        store=store,
        users=users,
        projects=projects,
        sessions=SessionManager(store, users),
    )


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    state = build_state(settings, SqliteRecordStore(settings.db_path))

    if getattr(settings, "seed_data", True):
        initialize_data(state.store, state.users)

    state.sessions.restore_session()
    return state
