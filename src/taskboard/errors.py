# src/taskboard/errors.py

"""
Typed failures raised by the core.

Read-side StorageError is swallowed by the repositories (empty result);
everything else reaches the caller, which turns it into a short
user-visible message via friendly_error_message().
"""

from __future__ import annotations


class TaskboardError(Exception):
    """Base class for every failure the core reports on purpose."""


class ValidationError(TaskboardError, ValueError):
    """Bad input: empty required field, malformed email, unknown status..."""


class NotFoundError(TaskboardError, LookupError):
    """A referenced project, task or user id does not exist."""


class AuthenticationError(TaskboardError):
    """Credential mismatch, missing credential store, or no active session."""


class StorageError(TaskboardError):
    """The record store failed to read or write."""


def friendly_error_message(operation: str, err: BaseException) -> str:
    """
    Message suitable for showing to a user.

    Typed input/lookup/auth errors carry their own (safe) message; storage
    and unexpected errors are reduced to "Failed to <operation>. Please try again."
    """
    if isinstance(err, (ValidationError, NotFoundError, AuthenticationError)):
        msg = str(err).strip()
        if msg:
            return msg
    return f"Failed to {operation}. Please try again."
