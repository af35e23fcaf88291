# src/taskboard/seed.py

"""
First-run sample data: one manager, one member and a sample project.

Users are seeded whenever the users collection is empty; the sample project
only once, guarded by the "hasInitialData" marker. Best-effort: failures are
logged and never raised.
"""

from __future__ import annotations

import logging

from .core.codec import encode_projects, is_absent
from .core.models import Member, Project, Role, Task, TaskStatus
from .core.ports import RecordStore
from .storage.keys import PROJECTS_KEY, SEED_MARKER_KEY
from .users.repository import UserRepository

logger = logging.getLogger(__name__)

SAMPLE_USERS: tuple[dict[str, str], ...] = (
    {
        "id": "manager1",
        "email": "manager@example.com",
        "name": "Project Manager",
        "role": Role.MANAGER.value,
        "password": "manager123",
    },
    {
        "id": "member1",
        "email": "member@example.com",
        "name": "Team Member",
        "role": Role.MEMBER.value,
        "password": "member123",
    },
)


def sample_projects() -> list[Project]:
    return [
        Project(
            id="1",
            name="Website Redesign",
            description="Redesign the company website with modern UI/UX",
            members=[
                Member(user_id="manager1", email="manager@example.com", role=Role.MANAGER.value),
                Member(user_id="member1", email="member@example.com", role=Role.MEMBER.value),
            ],
            tasks=[
                Task(
                    id="101",
                    title="Create wireframes",
                    description="Design wireframes for all main pages",
                    assigned_to="member@example.com",
                    created_by="manager@example.com",
                    status=TaskStatus.IN_PROGRESS.value,
                    priority="High",
                    due_date="2023-06-15",
                    created_at="2023-05-01T10:00:00Z",
                    comments=[],
                )
            ],
            created_at="2023-05-01T09:00:00Z",
        )
    ]


def seed_users(users: UserRepository) -> int:
    if users.has_users():
        return 0
    n = 0
    for sample in SAMPLE_USERS:
        users.register_user(
            sample["email"],
            sample["password"],
            name=sample["name"],
            role=sample["role"],
            user_id=sample["id"],
        )
        n += 1
    return n


def initialize_data(store: RecordStore, users: UserRepository) -> None:
    try:
        created = seed_users(users)
        if created:
            logger.info("Seeded %d sample users.", created)
    except Exception:
        logger.exception("Error initializing sample users.")

    try:
        if not is_absent(store.get(SEED_MARKER_KEY)):
            return
        if is_absent(store.get(PROJECTS_KEY)):
            store.set(PROJECTS_KEY, encode_projects(sample_projects()))
            logger.info("Seeded sample project.")
        store.set(SEED_MARKER_KEY, "true")
    except Exception:
        logger.exception("Error initializing sample data.")
