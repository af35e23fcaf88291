# src/taskboard/users/repository.py

from __future__ import annotations

import logging

from ..core.codec import decode_users, encode_users
from ..core.locks import KeyedLocks
from ..core.models import Role, User
from ..core.ports import RecordStore
from ..core.validation import IdAllocator, is_valid_email, normalize_email, now_iso
from ..errors import NotFoundError, StorageError, ValidationError
from ..storage.keys import USERS_KEY
from .passwords import DEFAULT_ITERATIONS, hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserRepository:
    """
    Users collection (one JSON array under the "users" key).

    Emails are unique case-insensitively and stored lower-cased.
    Passwords are stored only as salted hash records.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        serialize_writes: bool = True,
        password_iterations: int = DEFAULT_ITERATIONS,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._store = store
        self._locks = locks if locks is not None else KeyedLocks(enabled=serialize_writes)
        self._iterations = password_iterations
        self._ids = IdAllocator()

    def _load(self) -> list[User]:
        try:
            raw = self._store.get(USERS_KEY)
        except StorageError:
            logger.warning("Users read failed; treating collection as empty.", exc_info=True)
            return []
        return decode_users(raw)

    def _load_for_update(self) -> list[User]:
        return decode_users(self._store.get(USERS_KEY))

    def _save(self, users: list[User]) -> None:
        self._store.set(USERS_KEY, encode_users(users))

    @staticmethod
    def _find_email(users: list[User], email: str) -> User | None:
        key = normalize_email(email)
        for u in users:
            if normalize_email(u.email) == key:
                return u
        return None

    # ---- queries ----

    def list_users(self) -> list[User]:
        return [u.without_password() for u in self._load()]

    def list_members(self) -> list[User]:
        return [u for u in self.list_users() if u.role == Role.MEMBER]

    def get_by_email(self, email: str) -> User | None:
        u = self._find_email(self._load(), email)
        return u.without_password() if u is not None else None

    def get_by_id(self, user_id: str) -> User | None:
        for u in self._load():
            if u.id == user_id:
                return u.without_password()
        return None

    def has_users(self) -> bool:
        return bool(self._load())

    def verify_credentials(self, email: str, password: str) -> User | None:
        u = self._find_email(self._load(), email)
        if u is None or not verify_password(password or "", u.password):
            return None
        return u.without_password()

    # ---- mutations ----

    def register_user(
        self,
        email: str,
        password: str,
        name: str = "",
        role: str = Role.MEMBER.value,
        *,
        user_id: str | None = None,
    ) -> User:
        clean_email = normalize_email(email)
        if not clean_email:
            raise ValidationError("Email is required")
        if not is_valid_email(clean_email):
            raise ValidationError("Please enter a valid email address")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        parsed_role = Role.from_value(role)
        if parsed_role is None:
            raise ValidationError(f"Unknown role {role!r}")

        record = hash_password(password, iterations=self._iterations)

        with self._locks.hold(USERS_KEY):
            users = self._load_for_update()
            if self._find_email(users, clean_email) is not None:
                raise ValidationError("A user with this email already exists")
            taken = {u.id for u in users}
            if user_id is not None and user_id in taken:
                raise ValidationError(f"User id already exists: {user_id}")
            user = User(
                id=user_id or self._ids.next_id(taken),
                email=clean_email,
                name=(name or "").strip(),
                role=parsed_role.value,
                created_at=now_iso(),
                password=record,
            )
            users.append(user)
            self._save(users)

        logger.info("User registered id=%s email=%s role=%s", user.id, user.email, user.role)
        return user.without_password()

    def update_profile(self, user_id: str, name: str) -> User:
        with self._locks.hold(USERS_KEY):
            users = self._load_for_update()
            for u in users:
                if u.id == user_id:
                    u.name = (name or "").strip()
                    self._save(users)
                    logger.info("Profile updated id=%s", u.id)
                    return u.without_password()
        raise NotFoundError(f"User not found: {user_id}")

    def remove_user(self, user_id: str) -> None:
        with self._locks.hold(USERS_KEY):
            users = self._load_for_update()
            kept = [u for u in users if u.id != user_id]
            if len(kept) == len(users):
                raise NotFoundError(f"User not found: {user_id}")
            self._save(kept)
        logger.info("User removed id=%s", user_id)
