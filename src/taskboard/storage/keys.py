# src/taskboard/storage/keys.py

"""Reserved record-store keys. Changing one orphans existing data."""

SESSION_KEY = "session"
PROJECTS_KEY = "projects"
USERS_KEY = "users"
SEED_MARKER_KEY = "hasInitialData"
