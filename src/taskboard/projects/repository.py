# src/taskboard/projects/repository.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.codec import decode_projects, encode_projects
from ..core.locks import KeyedLocks
from ..core.models import Member, Priority, Project, Task, TaskStatus, User
from ..core.ports import RecordStore
from ..core.validation import IdAllocator, is_valid_email, normalize_email, now_iso, require_text
from ..errors import NotFoundError, StorageError, ValidationError
from ..storage.keys import PROJECTS_KEY

logger = logging.getLogger(__name__)


class ProjectRepository:
    """
    Projects collection with embedded tasks, stored as one JSON array.

    Every mutation is read-modify-write of the whole collection:
      get -> decode -> change in memory -> encode -> set

    Consistency:
    - with serialize_writes=True (default) the chain runs under a per-key lock,
      so overlapping mutations from several threads are applied in order
    - with serialize_writes=False two overlapping mutations race and the
      later write wins (the earlier change is silently lost)

    Queries treat a failed read as an empty collection. Mutations never
    write back from a failed read: both read and write failures raise
    StorageError and leave the stored blob untouched.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        serialize_writes: bool = True,
        assignee_domain: str = "",
        locks: KeyedLocks | None = None,
    ) -> None:
        self._store = store
        self._locks = locks if locks is not None else KeyedLocks(enabled=serialize_writes)
        self._assignee_domain = (assignee_domain or "").strip().lower().lstrip("@")
        self._ids = IdAllocator()

    # ---- low-level helpers ----

    def _load(self) -> list[Project]:
        try:
            raw = self._store.get(PROJECTS_KEY)
        except StorageError:
            logger.warning("Projects read failed; treating collection as empty.", exc_info=True)
            return []
        return decode_projects(raw)

    def _load_for_update(self) -> list[Project]:
        # No swallowing here: a mutation must not rebuild from a failed read.
        return decode_projects(self._store.get(PROJECTS_KEY))

    def _save(self, projects: list[Project]) -> None:
        self._store.set(PROJECTS_KEY, encode_projects(projects))

    @staticmethod
    def _find(projects: list[Project], project_id: str) -> Project:
        for p in projects:
            if p.id == project_id:
                return p
        raise NotFoundError(f"Project not found: {project_id}")

    @staticmethod
    def _parse_status(raw: str | None) -> TaskStatus:
        status = TaskStatus.from_value(raw)
        if status is None:
            allowed = ", ".join(s.value for s in TaskStatus)
            raise ValidationError(f"Unknown task status {raw!r} (expected one of: {allowed})")
        return status

    # ---- public API ----

    def list_projects(self) -> list[Project]:
        return self._load()

    def get_project(self, project_id: str) -> Project:
        return self._find(self._load(), str(project_id))

    def create_project(
        self,
        name: str,
        description: str = "",
        due_date: str | None = None,
        members: Iterable[User] = (),
    ) -> Project:
        clean_name = require_text(name, "Project name")

        member_list: list[Member] = []
        seen: set[str] = set()
        for u in members:
            key = normalize_email(u.email)
            if key in seen:
                continue
            seen.add(key)
            member_list.append(Member.from_user(u))

        with self._locks.hold(PROJECTS_KEY):
            projects = self._load_for_update()
            project = Project(
                id=self._ids.next_id({p.id for p in projects}),
                name=clean_name,
                description=(description or "").strip(),
                members=member_list,
                tasks=[],
                created_at=now_iso(),
                due_date=due_date or None,
            )
            projects.append(project)
            self._save(projects)

        logger.info("Project created id=%s name=%r members=%d", project.id, project.name, len(member_list))
        return project

    def add_member(self, project_id: str, user: User) -> Project:
        with self._locks.hold(PROJECTS_KEY):
            projects = self._load_for_update()
            project = self._find(projects, str(project_id))
            if project.has_member(user.email):
                return project
            project.members.append(Member.from_user(user))
            self._save(projects)

        logger.info("Member added project_id=%s email=%s", project.id, user.email)
        return project

    def add_task(
        self,
        project_id: str,
        title: str,
        description: str = "",
        assigned_to: str | None = None,
        status: str = TaskStatus.TODO.value,
        priority: str | None = None,
        due_date: str | None = None,
        created_by: str | None = None,
    ) -> Task:
        clean_title = require_text(title, "Task title")

        assignee = normalize_email(assigned_to) or None
        if assignee is not None and not is_valid_email(assignee, domain=self._assignee_domain):
            if self._assignee_domain:
                raise ValidationError(f"Please enter a valid {self._assignee_domain} address")
            raise ValidationError("Please enter a valid email address")

        task_status = self._parse_status(status or TaskStatus.TODO.value)

        task_priority: str | None = None
        if priority:
            p = Priority.from_value(priority)
            if p is None:
                raise ValidationError(f"Unknown priority {priority!r}")
            task_priority = p.value

        # Membership of the assignee is deliberately not checked.
        with self._locks.hold(PROJECTS_KEY):
            projects = self._load_for_update()
            project = self._find(projects, str(project_id))
            task = Task(
                id=self._ids.next_id({t.id for t in project.tasks}),
                title=clean_title,
                description=(description or "").strip(),
                assigned_to=assignee,
                created_by=normalize_email(created_by) or None,
                status=task_status.value,
                priority=task_priority,
                due_date=(due_date or "").strip() or None,
                created_at=now_iso(),
                comments=[],
            )
            project.tasks.append(task)
            self._save(projects)

        logger.info(
            "Task added project_id=%s task_id=%s assigned_to=%s status=%s",
            project.id,
            task.id,
            task.assigned_to,
            task.status,
        )
        return task

    def update_task_status(self, project_id: str, task_id: str, new_status: str) -> Task:
        status = self._parse_status(new_status)

        with self._locks.hold(PROJECTS_KEY):
            projects = self._load_for_update()
            project = self._find(projects, str(project_id))
            task = project.find_task(str(task_id))
            if task is None:
                raise NotFoundError(f"Task not found: {task_id}")
            task.status = status.value
            self._save(projects)

        logger.info("Task status project_id=%s task_id=%s -> %s", project.id, task.id, task.status)
        return task

    def delete_project(self, project_id: str) -> None:
        with self._locks.hold(PROJECTS_KEY):
            projects = self._load_for_update()
            project = self._find(projects, str(project_id))
            projects.remove(project)
            self._save(projects)

        logger.info("Project deleted id=%s (tasks discarded=%d)", project.id, len(project.tasks))
