# src/taskboard/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.models import Project, Session, Task, TaskStatus
from ..core.state import AppState
from ..errors import AuthenticationError, NotFoundError, TaskboardError, friendly_error_message
from ..projects.access import STATUS_FILTER_ALL, compute_stats, search_and_filter, visible_projects

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console (/help, /login, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._operations: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        operation: str | None = None,
    ) -> None:
        """
        `operation` names the action in failure messages
        ("Failed to <operation>. Please try again.").
        """
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._operations[key] = operation or f"run /{key}"
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            self._operations[alias.lower()] = self._operations[key]

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskboardError as e:
            logger.info("/%s failed: %s", name, e)
            return friendly_error_message(self._operations[name], e)
        except Exception as e:
            logger.exception("/%s crashed.", name)
            return friendly_error_message(self._operations[name], e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def _format_task(t: Task) -> str:
    parts = [f"    [{t.id}] {t.title} ({t.display_status}, {t.display_priority})"]
    if t.assigned_to:
        parts.append(f" -> {t.assigned_to}")
    if t.due_date:
        parts.append(f" due {t.due_date}")
    return "".join(parts)


def _format_project(p: Project, *, with_tasks: bool = True) -> str:
    head = f"[{p.id}] {p.name} - {len(p.tasks)} task(s)"
    if p.due_date:
        head += f", due {p.due_date}"
    lines = [head]
    if p.description:
        lines.append(f"    {p.description}")
    if with_tasks:
        lines.extend(_format_task(t) for t in p.tasks)
    return "\n".join(lines)


def _require_manager(session: Session, action: str) -> None:
    if not session.is_manager:
        raise AuthenticationError(f"Only managers can {action}.")


def _usage(text: str) -> str:
    return f"Usage: {text}"


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return _usage("/login <email> <password>")
    if emit:
        with contextlib.suppress(Exception):
            emit("Signing in...")
    user = state.sessions.login(args[0], args[1])
    dashboard = "Manager Dashboard" if user.is_manager else "My Dashboard"
    return f"Welcome, {user.name or user.email}. ({dashboard})"


def cmd_logout(state: AppState, args: list[str]) -> str:
    state.sessions.logout()
    return "Logged out."


def cmd_whoami(state: AppState, args: list[str]) -> str:
    session = state.sessions.current
    if session is None:
        return "Not logged in."
    u = session.user
    role = u.role.capitalize() if u.role else "Member"
    lines = [f"{u.name or '(no name)'} <{u.email}>", f"  Role: {role}"]
    if u.created_at:
        lines.append(f"  Member since: {u.created_at}")
    return "\n".join(lines)


def cmd_projects(state: AppState, args: list[str]) -> str:
    """
    /projects                      -> projects visible to you
    /projects <query>              -> search task title/description
    /projects --status=Completed   -> filter by status (combinable with a query)
    """
    session = state.sessions.require_session()

    status: str | None = None
    words: list[str] = []
    for a in args:
        if a.startswith("--status="):
            status = a.split("=", 1)[1] or STATUS_FILTER_ALL
        else:
            words.append(a)
    query = " ".join(words)

    projects = visible_projects(state.projects.list_projects(), session)
    if query or (status and status != STATUS_FILTER_ALL):
        projects = search_and_filter(projects, query, status)

    if not projects:
        return "No projects found."
    return "\n".join(_format_project(p) for p in projects)


def cmd_project(state: AppState, args: list[str]) -> str:
    if not args:
        return _usage("/project <project_id>")
    session = state.sessions.require_session()
    project = state.projects.get_project(args[0])
    if not session.is_manager:
        mine = visible_projects([project], session)
        if not mine:
            raise NotFoundError(f"Project not found: {args[0]}")
        project = mine[0]

    lines = [_format_project(project, with_tasks=False)]
    if project.members:
        lines.append("  Members: " + ", ".join(f"{m.email} ({m.role or 'member'})" for m in project.members))
    lines.append(f"  Created: {project.created_at or '-'}")
    if project.tasks:
        lines.append("  Tasks:")
        lines.extend(_format_task(t) for t in project.tasks)
    else:
        lines.append("  No tasks yet.")
    return "\n".join(lines)


def cmd_add_project(state: AppState, args: list[str]) -> str:
    if not args:
        return _usage('/add-project "<name>" ["<description>"] [due-date]')
    session = state.sessions.require_session()
    _require_manager(session, "create projects")
    name = args[0]
    description = args[1] if len(args) > 1 else ""
    due_date = args[2] if len(args) > 2 else None
    project = state.projects.create_project(name, description, due_date, members=[session.user])
    return f"Project created: [{project.id}] {project.name}"


def cmd_add_member(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return _usage("/add-member <project_id> <email>")
    session = state.sessions.require_session()
    _require_manager(session, "add project members")
    user = state.users.get_by_email(args[1])
    if user is None:
        raise NotFoundError(f"No user with email {args[1]}")
    project = state.projects.add_member(args[0], user)
    return f"{user.email} is a member of [{project.id}] {project.name}."


def cmd_add_task(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return _usage('/add-task <project_id> "<title>" [assignee-email] [priority] [due-date]')
    session = state.sessions.require_session()
    _require_manager(session, "add tasks")
    task = state.projects.add_task(
        args[0],
        args[1],
        assigned_to=args[2] if len(args) > 2 else None,
        priority=args[3] if len(args) > 3 else None,
        due_date=args[4] if len(args) > 4 else None,
        created_by=session.email,
    )
    return f"Task added: [{task.id}] {task.title} ({task.display_status})"


def cmd_status(state: AppState, args: list[str]) -> str:
    if len(args) < 3:
        statuses = " | ".join(s.value for s in TaskStatus)
        return _usage(f'/status <project_id> <task_id> "<{statuses}>"')
    session = state.sessions.require_session()
    project_id, task_id = args[0], args[1]
    new_status = " ".join(args[2:])

    if not session.is_manager:
        # Members may only touch tasks that appear in their own view.
        mine = visible_projects(state.projects.list_projects(), session)
        if not any(p.id == project_id and p.find_task(task_id) for p in mine):
            raise NotFoundError(f"Task not found: {task_id}")

    task = state.projects.update_task_status(project_id, task_id, new_status)
    return f"Task [{task.id}] {task.title} is now {task.status}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    session = state.sessions.require_session()
    stats = compute_stats(visible_projects(state.projects.list_projects(), session))
    return (
        "Tasks:\n"
        f"  Total: {stats.total_tasks}\n"
        f"  To Do: {stats.todo}\n"
        f"  In Progress: {stats.in_progress}\n"
        f"  Completed: {stats.completed}"
    )


def cmd_team(state: AppState, args: list[str]) -> str:
    session = state.sessions.require_session()
    _require_manager(session, "manage the team")
    members = state.users.list_members()
    if not members:
        return "No team members added yet."
    lines = [f"Team Members ({len(members)}):"]
    lines.extend(f"  [{m.id}] {m.email}" + (f" - {m.name}" if m.name else "") for m in members)
    return "\n".join(lines)


def cmd_add_user(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return _usage('/add-user <email> <password> ["<name>"]')
    session = state.sessions.require_session()
    _require_manager(session, "add team members")
    user = state.users.register_user(args[0], args[1], name=args[2] if len(args) > 2 else "")
    return f"Team member added: {user.email}"


def cmd_remove_user(state: AppState, args: list[str]) -> str:
    if not args:
        return _usage("/remove-user <user_id>")
    session = state.sessions.require_session()
    _require_manager(session, "remove team members")
    target = state.users.get_by_id(args[0])
    if target is None or target.is_manager:
        # Only member accounts are managed from the team list.
        raise NotFoundError(f"Team member not found: {args[0]}")
    state.users.remove_user(target.id)
    return f"Team member removed: {target.email}"


def cmd_profile_name(state: AppState, args: list[str]) -> str:
    if not args:
        return _usage('/profile-name "<name>"')
    session = state.sessions.require_session()
    user = state.users.update_profile(session.user.id, " ".join(args))
    state.sessions.replace_user(user)
    return f"Profile updated: {user.name or user.email}"


def cmd_delete_project(state: AppState, args: list[str]) -> str:
    if not args:
        return _usage("/delete-project <project_id>")
    session = state.sessions.require_session()
    _require_manager(session, "delete projects")
    state.projects.delete_project(args[0])
    return f"Project {args[0]} deleted."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.", operation="log in")
registry.register("logout", cmd_logout, help_text="Sign out.", operation="log out")
registry.register("whoami", cmd_whoami, help_text="Show your profile.", aliases=["profile"], operation="load profile")
registry.register(
    "projects",
    cmd_projects,
    help_text="List projects: /projects [query] [--status=<status>].",
    operation="load projects",
)
registry.register("project", cmd_project, help_text="Project details: /project <id>.", operation="load project")
registry.register(
    "add-project", cmd_add_project, help_text='Create a project (managers): /add-project "<name>".',
    operation="save project",
)
registry.register(
    "add-member", cmd_add_member, help_text="Add a user to a project: /add-member <project_id> <email>.",
    operation="add project member",
)
registry.register(
    "add-task", cmd_add_task, help_text='Add a task (managers): /add-task <project_id> "<title>" [assignee].',
    operation="save task",
)
registry.register(
    "status", cmd_status, help_text="Update task status: /status <project_id> <task_id> <status>.",
    operation="update task status",
)
registry.register("stats", cmd_stats, help_text="Task counts for your view.", operation="load stats")
registry.register("team", cmd_team, help_text="List team members (managers).", operation="load team members")
registry.register(
    "add-user", cmd_add_user, help_text="Add a team member (managers): /add-user <email> <password>.",
    operation="add team member",
)
registry.register(
    "remove-user", cmd_remove_user, help_text="Remove a team member (managers): /remove-user <user_id>.",
    operation="remove team member",
)
registry.register(
    "profile-name", cmd_profile_name, help_text='Change your display name: /profile-name "<name>".',
    operation="update profile",
)
registry.register(
    "delete-project", cmd_delete_project, help_text="Delete a project and its tasks (managers).",
    operation="delete project",
)
