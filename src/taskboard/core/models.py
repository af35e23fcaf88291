# src/taskboard/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Task lifecycle status, stored verbatim ("To Do", ...).

    Notes:
    - Task.status is kept as a plain string so unknown values read from
      storage survive a rewrite; stats count anything unknown as To Do.
    """

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def from_value(cls, raw: str | None) -> TaskStatus | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            pass
        # Accept case/spacing variants typed by hand: "completed", "in-progress".
        norm = raw.strip().lower().replace("-", " ").replace("_", " ")
        for s in cls:
            if s.value.lower() == norm:
                return s
        return None


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NORMAL = "Normal"

    @classmethod
    def from_value(cls, raw: str | None) -> Priority | None:
        if not raw:
            return None
        for p in cls:
            if p.value.lower() == raw.strip().lower():
                return p
        return None


class Role(StrEnum):
    MANAGER = "manager"
    MEMBER = "member"

    @classmethod
    def from_value(cls, raw: str | None) -> Role | None:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(slots=True)
class User:
    id: str
    email: str
    name: str
    role: str
    created_at: str | None = None
    # Salted hash record (see users/passwords.py). Never set on session users.
    password: str | None = None

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    def without_password(self) -> User:
        return replace(self, password=None)


@dataclass(slots=True)
class Member:
    email: str
    user_id: str | None = None
    role: str | None = None

    @staticmethod
    def from_user(user: User) -> Member:
        return Member(email=user.email, user_id=user.id, role=user.role)


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str | None = None
    assigned_to: str | None = None
    created_by: str | None = None
    status: str | None = TaskStatus.TODO.value
    priority: str | None = None
    due_date: str | None = None
    created_at: str | None = None
    comments: list[Any] | None = None

    # Display defaults live here, not in the codec: storage keeps what it was given.

    @property
    def display_description(self) -> str:
        return self.description or ""

    @property
    def display_priority(self) -> str:
        return self.priority or Priority.NORMAL.value

    @property
    def display_status(self) -> str:
        return self.status or TaskStatus.TODO.value

    def is_assigned_to(self, email: str | None) -> bool:
        if not email or not self.assigned_to:
            return False
        return self.assigned_to.strip().casefold() == email.strip().casefold()


@dataclass(slots=True)
class Project:
    id: str
    name: str
    description: str | None = None
    members: list[Member] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    created_at: str | None = None
    due_date: str | None = None

    def has_member(self, email: str | None) -> bool:
        if not email:
            return False
        key = email.strip().casefold()
        return any(m.email.strip().casefold() == key for m in self.members)

    def find_task(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None


@dataclass(frozen=True, slots=True)
class Session:
    """The single active authenticated user context (password already stripped)."""

    user: User

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def is_manager(self) -> bool:
        return self.user.is_manager
