# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..auth.session import SessionManager
from ..projects.repository import ProjectRepository
from ..users.repository import UserRepository
from .ports import RecordStore


@dataclass
class AppState:
    # Settings object (real Settings or a test SimpleNamespace).
    settings: object

    store: RecordStore
    users: UserRepository
    projects: ProjectRepository
    sessions: SessionManager
