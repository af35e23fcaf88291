# src/taskboard/projects/access.py

"""
Per-user views and aggregates over the projects collection.

All functions are pure: they return new Project objects (shallow copies with
a filtered task list) and never touch what the repository loaded.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from ..core.models import Project, Session, TaskStatus

STATUS_FILTER_ALL = "All"


@dataclass(frozen=True, slots=True)
class TaskStats:
    total_tasks: int = 0
    completed: int = 0
    in_progress: int = 0
    todo: int = 0


def projects_for_member(projects: Iterable[Project], email: str) -> list[Project]:
    """
    Projects where `email` is a member AND has at least one assigned task,
    each reduced to that member's tasks.
    """
    out: list[Project] = []
    for p in projects:
        if not p.has_member(email):
            continue
        mine = [t for t in p.tasks if t.is_assigned_to(email)]
        if not mine:
            continue
        out.append(replace(p, tasks=mine))
    return out


def compute_stats(projects: Iterable[Project]) -> TaskStats:
    total = completed = in_progress = todo = 0
    for p in projects:
        for t in p.tasks:
            total += 1
            if t.status == TaskStatus.COMPLETED:
                completed += 1
            elif t.status == TaskStatus.IN_PROGRESS:
                in_progress += 1
            else:
                # Missing or unknown status counts as To Do.
                todo += 1
    return TaskStats(total_tasks=total, completed=completed, in_progress=in_progress, todo=todo)


def search_and_filter(
    projects: Iterable[Project],
    query: str | None = None,
    status_filter: str | None = None,
) -> list[Project]:
    """
    Keep tasks whose title+description contains `query` (case-insensitive)
    AND whose status equals `status_filter` ("All"/None disables it).
    Projects left without tasks are dropped.
    """
    needle = (query or "").strip().casefold()
    wanted: str | None = None
    if status_filter and status_filter != STATUS_FILTER_ALL:
        parsed = TaskStatus.from_value(status_filter)
        wanted = parsed.value if parsed is not None else status_filter

    out: list[Project] = []
    for p in projects:
        kept = []
        for t in p.tasks:
            if needle:
                haystack = f"{t.title or ''} {t.description or ''}".casefold()
                if needle not in haystack:
                    continue
            if wanted is not None and t.status != wanted:
                continue
            kept.append(t)
        if kept:
            out.append(replace(p, tasks=kept))
    return out


def visible_projects(projects: Iterable[Project], session: Session) -> list[Project]:
    """Managers see everything; members see only their own assignments."""
    if session.is_manager:
        return list(projects)
    return projects_for_member(projects, session.email)
