# src/taskboard/core/codec.py

"""
JSON codec for the stored collections.

Decoding never raises: malformed blobs become empty collections and
malformed entries are skipped, both with a warning. Encoding is canonical
(stable key order, insertion order of items, None-valued optional fields
omitted) so encode(decode(x)) == x for anything encode produced.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from .models import Member, Project, Session, Task, User

logger = logging.getLogger(__name__)

# Literal some clients store for an unset value; read as absent.
ABSENT_MARKER = "undefined"


def is_absent(raw: str | None) -> bool:
    return raw is None or raw.strip() == "" or raw.strip() == ABSENT_MARKER


def _load_array(raw: str | None, what: str) -> list[Any]:
    if is_absent(raw):
        return []
    try:
        val = json.loads(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Stored %s could not be parsed; treating as empty.", what)
        return []
    if not isinstance(val, list):
        logger.warning("Stored %s is not an array (got %s); treating as empty.", what, type(val).__name__)
        return []
    return val


def _dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def _id(raw: Any) -> str | None:
    # Ids are strings; numbers written by older builds are coerced.
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (str, int)):
        s = str(raw).strip()
        return s or None
    return None


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    return None


def _compact(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# ---- members ----


def _decode_member(raw: Any) -> Member | None:
    if not isinstance(raw, dict):
        return None
    email = _opt_str(raw.get("email"))
    if not email:
        return None
    return Member(email=email, user_id=_id(raw.get("userId")), role=_opt_str(raw.get("role")))


def _encode_member(m: Member) -> dict[str, Any]:
    return _compact({"userId": m.user_id, "email": m.email, "role": m.role})


# ---- tasks ----


def decode_task(raw: Any) -> Task | None:
    if not isinstance(raw, dict):
        return None
    task_id = _id(raw.get("id"))
    if task_id is None:
        return None
    comments = raw.get("comments")
    return Task(
        id=task_id,
        title=_opt_str(raw.get("title")) or "",
        description=_opt_str(raw.get("description")),
        assigned_to=_opt_str(raw.get("assignedTo")),
        created_by=_opt_str(raw.get("createdBy")),
        status=_opt_str(raw.get("status")),
        priority=_opt_str(raw.get("priority")),
        due_date=_opt_str(raw.get("dueDate")),
        created_at=_opt_str(raw.get("createdAt")),
        comments=list(comments) if isinstance(comments, list) else None,
    )


def encode_task(t: Task) -> dict[str, Any]:
    return _compact(
        {
            "id": t.id,
            "title": t.title,
            "description": t.description,
            "assignedTo": t.assigned_to,
            "createdBy": t.created_by,
            "status": t.status,
            "priority": t.priority,
            "dueDate": t.due_date,
            "createdAt": t.created_at,
            "comments": t.comments,
        }
    )


# ---- projects ----


def decode_project(raw: Any) -> Project | None:
    if not isinstance(raw, dict):
        return None
    project_id = _id(raw.get("id"))
    if project_id is None:
        return None

    members_raw = raw.get("members")
    tasks_raw = raw.get("tasks")

    members: list[Member] = []
    if isinstance(members_raw, list):
        for m in members_raw:
            member = _decode_member(m)
            if member is None:
                logger.warning("Skipping malformed member in project id=%s", project_id)
                continue
            members.append(member)

    tasks: list[Task] = []
    if isinstance(tasks_raw, list):
        for t in tasks_raw:
            task = decode_task(t)
            if task is None:
                logger.warning("Skipping malformed task in project id=%s", project_id)
                continue
            tasks.append(task)

    return Project(
        id=project_id,
        name=_opt_str(raw.get("name")) or "",
        description=_opt_str(raw.get("description")),
        members=members,
        tasks=tasks,
        created_at=_opt_str(raw.get("createdAt")),
        due_date=_opt_str(raw.get("dueDate")),
    )


def encode_project(p: Project) -> dict[str, Any]:
    return _compact(
        {
            "id": p.id,
            "name": p.name,
            "description": p.description,
            "members": [_encode_member(m) for m in p.members],
            "tasks": [encode_task(t) for t in p.tasks],
            "createdAt": p.created_at,
            "dueDate": p.due_date,
        }
    )


def decode_projects(raw: str | None) -> list[Project]:
    out: list[Project] = []
    for item in _load_array(raw, "projects"):
        project = decode_project(item)
        if project is None:
            logger.warning("Skipping malformed project entry: %r", item)
            continue
        out.append(project)
    return out


def encode_projects(projects: Iterable[Project]) -> str:
    return _dumps([encode_project(p) for p in projects])


# ---- users ----


def decode_user(raw: Any) -> User | None:
    if not isinstance(raw, dict):
        return None
    user_id = _id(raw.get("id"))
    email = _opt_str(raw.get("email"))
    if user_id is None or not email:
        return None
    return User(
        id=user_id,
        email=email,
        name=_opt_str(raw.get("name")) or "",
        role=_opt_str(raw.get("role")) or "member",
        created_at=_opt_str(raw.get("createdAt")),
        password=_opt_str(raw.get("password")),
    )


def encode_user(u: User) -> dict[str, Any]:
    return _compact(
        {
            "id": u.id,
            "email": u.email,
            "name": u.name,
            "role": u.role,
            "createdAt": u.created_at,
            "password": u.password,
        }
    )


def decode_users(raw: str | None) -> list[User]:
    out: list[User] = []
    for item in _load_array(raw, "users"):
        user = decode_user(item)
        if user is None:
            logger.warning("Skipping malformed user entry.")
            continue
        out.append(user)
    return out


def encode_users(users: Iterable[User]) -> str:
    return _dumps([encode_user(u) for u in users])


# ---- session ----


def decode_session(raw: str | None) -> Session | None:
    if is_absent(raw):
        return None
    try:
        val = json.loads(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Stored session could not be parsed; ignoring it.")
        return None
    if not isinstance(val, dict):
        logger.warning("Stored session is not an object; ignoring it.")
        return None
    user = decode_user(val.get("user"))
    if user is None:
        logger.warning("Stored session has no usable user; ignoring it.")
        return None
    return Session(user=user.without_password())


def encode_session(session: Session) -> str:
    return _dumps({"user": encode_user(session.user.without_password())})
