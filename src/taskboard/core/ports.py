# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Repositories depend on these Protocols instead of concrete implementations,
so the SQLite record store can be swapped for an in-memory fake in tests.
"""

from typing import Protocol

from .models import Project, Task, User


class RecordStore(Protocol):
    """
    String-keyed persistence of opaque string blobs.

    get() returns None when the key is absent. Backend failures are raised
    as StorageError; callers decide whether that is fatal.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class ProjectRepo(Protocol):
    def list_projects(self) -> list[Project]: ...
    def get_project(self, project_id: str) -> Project: ...

    def create_project(
            self,
            name: str,
            description: str = "",
            due_date: str | None = None,
            members: tuple[User, ...] | list[User] = (),
    ) -> Project: ...

    def add_member(self, project_id: str, user: User) -> Project: ...

    def add_task(
            self,
            project_id: str,
            title: str,
            description: str = "",
            assigned_to: str | None = None,
            status: str = "To Do",
            priority: str | None = None,
            due_date: str | None = None,
            created_by: str | None = None,
    ) -> Task: ...

    def update_task_status(self, project_id: str, task_id: str, new_status: str) -> Task: ...
    def delete_project(self, project_id: str) -> None: ...


class UserRepo(Protocol):
    def list_users(self) -> list[User]: ...
    def list_members(self) -> list[User]: ...
    def get_by_email(self, email: str) -> User | None: ...
    def get_by_id(self, user_id: str) -> User | None: ...
    def verify_credentials(self, email: str, password: str) -> User | None: ...

    def register_user(
            self,
            email: str,
            password: str,
            name: str = "",
            role: str = "member",
    ) -> User: ...

    def update_profile(self, user_id: str, name: str) -> User: ...
    def remove_user(self, user_id: str) -> None: ...
