# src/taskboard/core/validation.py

from __future__ import annotations

import re
import threading
import time
from datetime import UTC, datetime

from ..errors import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str | None, *, domain: str = "") -> bool:
    """
    Syntactic check. With a domain ("gmail.com"), the address must also
    belong to it.
    """
    e = normalize_email(email)
    if not _EMAIL_RE.match(e):
        return False
    if domain:
        return e.endswith("@" + domain.lower().lstrip("@"))
    return True


def require_text(value: str | None, what: str) -> str:
    v = (value or "").strip()
    if not v:
        raise ValidationError(f"{what} is required")
    return v


def now_iso() -> str:
    # 2023-05-01T10:00:00.000Z
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class IdAllocator:
    """
    Millisecond-timestamp string ids, bumped forward on collision so two
    ids issued within the same millisecond still differ.
    """

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self, taken: set[str] | frozenset[str] = frozenset()) -> str:
        with self._lock:
            n = max(int(time.time() * 1000), self._last + 1)
            while str(n) in taken:
                n += 1
            self._last = n
            return str(n)
