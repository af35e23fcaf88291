"""
taskboard: projects, tasks and team members on a local record store.

Subpackages:
- core: models, JSON codec, ports, validation, shared state
- storage: SQLite key-value record store and reserved keys
- projects: projects repository + per-user access views
- users: team members, password hashing
- auth: session manager (login/logout/restore)
- cli: composition root, slash commands, console loop
"""
