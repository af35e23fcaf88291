# tests/test_commands.py

from __future__ import annotations

from taskboard.cli.commands import CommandRegistry, registry
from taskboard.core.state import AppState


def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, '/a x "y z"') == "h2:x,y z"
    assert reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_command_registry_turns_crashes_into_friendly_messages(state: AppState) -> None:
    reg = CommandRegistry()

    def boom(state, args):
        raise RuntimeError("sqlite exploded at 0xdeadbeef")

    reg.register("save", boom, "save", operation="save task")
    assert reg.handle(state, "/save") == "Failed to save task. Please try again."


def _project_id(reply: str) -> str:
    # "Project created: [<id>] <name>"
    return reply.split("[", 1)[1].split("]", 1)[0]


def _task_id(reply: str) -> str:
    return reply.split("[", 1)[1].split("]", 1)[0]


def test_console_flow_manager_then_member(team_state: AppState) -> None:
    h = lambda line: registry.handle(team_state, line) or ""  # noqa: E731

    assert h("/projects") == "Please log in first"
    assert h("/login manager@example.com wrong") == "Invalid email or password"

    assert "Manager Dashboard" in h("/login manager@example.com manager123")
    pid = _project_id(h('/add-project "Launch" "Product launch"'))
    assert "member@example.com is a member" in h(f"/add-member {pid} member@example.com")
    tid = _task_id(h(f'/add-task {pid} "Write copy" member@example.com High'))
    assert h('/add-task 999 "Orphan"') == "Project not found: 999"
    assert h(f'/add-task {pid} "Bad" someone') == "Please enter a valid email address"
    assert "Team Members (1)" in h("/team")
    assert h("/logout") == "Logged out."

    assert "My Dashboard" in h("/login member@example.com member123")
    listing = h("/projects")
    assert "Launch" in listing and "Write copy" in listing
    assert h('/add-project "Nope"') == "Only managers can create projects."
    assert h(f"/status {pid} {tid} In Progress").endswith("is now In Progress.")
    assert "In Progress: 1" in h("/stats")
    assert "Write copy" in h('/projects copy --status="In Progress"')
    assert h("/projects nothing-here") == "No projects found."
    assert "member@example.com" in h("/whoami")


def test_member_cannot_touch_other_tasks(team_state: AppState) -> None:
    h = lambda line: registry.handle(team_state, line) or ""  # noqa: E731

    h("/login manager@example.com manager123")
    pid = _project_id(h('/add-project "Launch"'))
    tid = _task_id(h(f'/add-task {pid} "Manager only" manager@example.com'))
    h("/logout")

    h("/login member@example.com member123")
    assert h(f"/status {pid} {tid} Completed") == f"Task not found: {tid}"
    assert h(f"/project {pid}") == f"Project not found: {pid}"


def test_storage_failure_is_reported_without_detail(fake_team_state: AppState) -> None:
    h = lambda line: registry.handle(fake_team_state, line) or ""  # noqa: E731

    h("/login manager@example.com manager123")
    pid = _project_id(h('/add-project "Launch"'))

    fake_team_state.store.fail_writes = True  # type: ignore[attr-defined]
    assert h(f'/add-task {pid} "Write copy"') == "Failed to save task. Please try again."


def test_manager_removes_team_member(team_state: AppState) -> None:
    h = lambda line: registry.handle(team_state, line) or ""  # noqa: E731

    h("/login member@example.com member123")
    assert h("/remove-user member1") == "Only managers can remove team members."
    h("/logout")

    h("/login manager@example.com manager123")
    assert h("/remove-user manager1") == "Team member not found: manager1"
    assert h("/remove-user member1") == "Team member removed: member@example.com"
    assert h("/team") == "No team members added yet."
    assert h("/remove-user member1") == "Team member not found: member1"
    h("/logout")

    assert h("/login member@example.com member123") == "Invalid email or password"


def test_profile_name_updates_session_and_store(team_state: AppState) -> None:
    h = lambda line: registry.handle(team_state, line) or ""  # noqa: E731

    assert h('/profile-name "New Name"') == "Please log in first"
    h("/login member@example.com member123")
    assert h('/profile-name "Sam Doe"') == "Profile updated: Sam Doe"
    assert h("/whoami").startswith("Sam Doe <member@example.com>")
    assert team_state.users.get_by_email("member@example.com").name == "Sam Doe"  # type: ignore[union-attr]

    # The persisted session carries the new name into the next start.
    assert team_state.sessions.restore_session().user.name == "Sam Doe"  # type: ignore[union-attr]
