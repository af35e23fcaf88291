# tests/test_access.py

from __future__ import annotations

from taskboard.core.models import Member, Project, Session, Task, User
from taskboard.projects.access import (
    TaskStats,
    compute_stats,
    projects_for_member,
    search_and_filter,
    visible_projects,
)


def _project() -> Project:
    return Project(
        id="p1",
        name="Launch",
        members=[Member(email="m@x.com", user_id="u1", role="member")],
        tasks=[
            Task(id="1", title="Mine", assigned_to="m@x.com"),
            Task(id="2", title="Theirs", assigned_to="o@x.com"),
        ],
    )


def test_projects_for_member_keeps_only_own_tasks() -> None:
    project = _project()

    view = projects_for_member([project], "m@x.com")

    assert len(view) == 1
    assert [t.id for t in view[0].tasks] == ["1"]
    # The stored project is untouched.
    assert [t.id for t in project.tasks] == ["1", "2"]


def test_projects_for_member_requires_membership() -> None:
    # o@x.com has a task but is not in members.
    assert projects_for_member([_project()], "o@x.com") == []


def test_projects_for_member_requires_an_assigned_task() -> None:
    project = _project()
    project.members.append(Member(email="idle@x.com"))
    assert projects_for_member([project], "idle@x.com") == []


def test_projects_for_member_ignores_email_case() -> None:
    view = projects_for_member([_project()], "M@X.com")
    assert [t.id for t in view[0].tasks] == ["1"]


def test_compute_stats_counts_unknown_as_todo() -> None:
    statuses = ["To Do", "In Progress", "Completed", "Completed", None]
    project = Project(id="p", name="P", tasks=[Task(id=str(i), title="t", status=s) for i, s in enumerate(statuses)])

    assert compute_stats([project]) == TaskStats(total_tasks=5, completed=2, in_progress=1, todo=2)
    assert compute_stats([]) == TaskStats()


def _searchable() -> list[Project]:
    return [
        Project(
            id="a",
            name="A",
            tasks=[
                Task(id="1", title="Write copy", description="Landing page", status="To Do"),
                Task(id="2", title="Design logo", description="Brand COPY review", status="Completed"),
            ],
        ),
        Project(id="b", name="B", tasks=[Task(id="3", title="Deploy", status="In Progress")]),
        Project(id="c", name="Empty"),
    ]


def test_search_matches_title_and_description_case_insensitively() -> None:
    out = search_and_filter(_searchable(), "copy", None)
    assert [p.id for p in out] == ["a"]
    assert [t.id for t in out[0].tasks] == ["1", "2"]


def test_search_and_status_filter_are_combined() -> None:
    out = search_and_filter(_searchable(), "copy", "Completed")
    assert [(p.id, [t.id for t in p.tasks]) for p in out] == [("a", ["2"])]

    out = search_and_filter(_searchable(), "", "In Progress")
    assert [(p.id, [t.id for t in p.tasks]) for p in out] == [("b", ["3"])]


def test_search_drops_projects_without_matches() -> None:
    assert search_and_filter(_searchable(), "nothing-matches", "All") == []
    # "All" with no query keeps every project that has tasks.
    assert [p.id for p in search_and_filter(_searchable(), "", "All")] == ["a", "b"]


def test_visible_projects_by_role() -> None:
    projects = [_project()]
    manager = Session(user=User(id="m", email="boss@x.com", name="Boss", role="manager"))
    member = Session(user=User(id="u1", email="m@x.com", name="Member", role="member"))

    assert visible_projects(projects, manager) == projects
    assert [t.id for t in visible_projects(projects, member)[0].tasks] == ["1"]
