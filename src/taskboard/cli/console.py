# src/taskboard/cli/console.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.state import AppState
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _prompt(state: AppState) -> str:
    session = state.sessions.current
    who = session.email if session else "guest"
    return f"[{who}] > "


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (session=%s).", state.sessions.state)
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskboard"))
    print(f"[{_ts_local()}] {app_name}: use /help for commands, /exit to quit.\n")

    session = state.sessions.current
    if session is not None:
        print(f"Welcome back, {session.user.name or session.email}.")

    def emit(text: str) -> None:
        # Immediate feedback for slower operations (password hashing on login).
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            line = input(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Commands start with '/'. Use /help to list them."
        print(response)

    logger.info("Console finished.")
